"""Category lookup - the engine only reads categories supplied by the caller"""

from typing import Callable, Iterable, List, Optional

from installment_ledger.domain.models import Category, MissingCategoryPolicy, Transaction, TransactionKind

CategoryLookup = Callable[[str], Optional[Category]]

UNCATEGORIZED_ID = ""
DEFAULT_UNCATEGORIZED_LABEL = "Uncategorized"


def build_category_lookup(categories: Iterable[Category]) -> CategoryLookup:
    """Index categories by id; later duplicates win"""
    by_id = {category.id: category for category in categories}
    return by_id.get


def uncategorized_category(kind: TransactionKind, name: str = DEFAULT_UNCATEGORIZED_LABEL) -> Category:
    return Category(id=UNCATEGORIZED_ID, name=name, kind=kind)


def resolve_category(
    lookup: CategoryLookup,
    category_id: Optional[str],
    kind: TransactionKind,
    policy: MissingCategoryPolicy = MissingCategoryPolicy.skip,
) -> Optional[Category]:
    """
    Resolve a category id under the given policy.

    Returns None when the id is dangling and the policy is skip; the caller
    then omits whatever depended on it.
    """
    category = lookup(category_id) if category_id else None
    if category is None and policy == MissingCategoryPolicy.uncategorized:
        return uncategorized_category(kind)
    return category


def category_name(
    lookup: CategoryLookup,
    category_id: Optional[str],
    fallback: str = DEFAULT_UNCATEGORIZED_LABEL,
) -> str:
    """Display name for a category id, with a fallback for dangling references"""
    category = lookup(category_id) if category_id else None
    return category.name if category is not None else fallback


def find_orphaned_installments(
    transactions: Iterable[Transaction],
    lookup: CategoryLookup,
    policy: MissingCategoryPolicy = MissingCategoryPolicy.skip,
) -> List[str]:
    """Ids of installment transactions that derived views will omit for a dangling category"""
    return [
        txn.id
        for txn in transactions
        if txn.is_installment
        and resolve_category(lookup, txn.category_id, txn.kind, policy) is None
    ]
