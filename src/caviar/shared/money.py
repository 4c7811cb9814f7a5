"""Money value object: an amount in minor units tagged with a currency code."""

from protean.fields import Integer, String

from caviar.domain import caviar


@caviar.value_object
class Money:
    """Value object representing a monetary amount with currency.

    Amounts are integers in minor units (kopecks, cents) so that totals never
    accumulate floating point error.
    """

    amount: Integer(required=True, min_value=0)
    currency: String(required=True, max_length=3)

    def multiply(self, quantity: int) -> "Money":
        return Money(amount=self.amount * quantity, currency=self.currency)

    def __str__(self) -> str:
        return f"{self.amount} {self.currency}"
