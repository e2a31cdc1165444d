"""
Account Consolidation

Merges the accounts of up to three template layers into one list.

Precedence is strict: country > industry > base. An overlay account whose
code already exists REPLACES the lower-layer account as a whole; fields
are never merged. Accounts are identified by code only.
"""

from coa_compiler.models.coa import (
    Account,
    AccountProvenance,
    COAStructure,
    SelectedTemplates,
)


class AccountConsolidator:
    """
    Builds the consolidated account list for one compilation.

    A new working map is created per call, so one consolidator may be
    shared between concurrent compilations.
    """

    def consolidate(self, templates: SelectedTemplates) -> COAStructure:
        accounts: dict[str, Account] = {}
        overridden: list[str] = []
        counts = {provenance: 0 for provenance in AccountProvenance}

        for provenance, template in templates.layers:
            for account in template.accounts:
                if account.code in accounts and account.code not in overridden:
                    overridden.append(account.code)
                # Copy with the layer tag; the template's own account is untouched
                accounts[account.code] = account.model_copy(
                    update={"provenance": provenance}
                )
                counts[provenance] += 1

        final_accounts = tuple(sorted(accounts.values(), key=lambda a: a.code))

        return COAStructure(
            final_accounts=final_accounts,
            base_account_count=counts[AccountProvenance.BASE],
            industry_account_count=counts[AccountProvenance.INDUSTRY],
            country_account_count=counts[AccountProvenance.COUNTRY],
            overridden_codes=tuple(sorted(overridden)),
        )
