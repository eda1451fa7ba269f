"""Internal transfer detection - keeps money moving between own accounts out of spend analytics"""

from typing import Iterable, Union

from finhub_engine.domain.models import Expense, Income

TRANSFER_KEYWORDS = ("transfer", "cc bill", "credit card bill", "credit card payment", "card payment")
TRANSFER_TAGS = frozenset({"transfer", "internal"})


def is_transfer(
    txn: Union[Expense, Income],
    keywords: Iterable[str] = TRANSFER_KEYWORDS,
    tags: Iterable[str] = TRANSFER_TAGS,
) -> bool:
    """
    True for internal transfers and credit-card bill payments.

    Matches the explicit flag, a "transfer" category, description/source
    keywords, or a transfer tag.
    """
    if txn.is_internal_transfer:
        return True
    if "transfer" in (txn.category or "").lower():
        return True

    text = (getattr(txn, "description", "") or getattr(txn, "source", "") or "").lower()
    if any(k in text for k in keywords):
        return True

    tag_set = {t.lower() for t in tags}
    return any(t.lower() in tag_set for t in txn.tags)
