# Domain traversal stops one level below the package, so the order aggregate
# and its repository are registered from here.
from caviar.ordering.order import order, repository  # noqa: F401
