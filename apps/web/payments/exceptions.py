"""Payment and checkout exceptions."""


class PaymentError(Exception):
    """Base exception for checkout and payment errors."""

    status_code = 500

    def __init__(self, message: str, code: str | None = None) -> None:
        self.message = message
        self.code = code
        super().__init__(message)


class CheckoutValidationError(PaymentError):
    """The checkout request was rejected before reaching the processor."""

    status_code = 400

    INVALID_SLUG = "INVALID_SLUG"
    EMPTY_CART = "EMPTY_CART"
    ITEMS_NOT_FOUND = "ITEMS_NOT_FOUND"

    def __init__(
        self,
        message: str,
        code: str | None = None,
        names: list[str] | None = None,
    ) -> None:
        super().__init__(message, code)
        self.names = names or []

    @classmethod
    def invalid_slug(cls) -> "CheckoutValidationError":
        return cls("Missing or invalid restaurantSlug.", cls.INVALID_SLUG)

    @classmethod
    def empty_cart(cls) -> "CheckoutValidationError":
        return cls("Cart is empty.", cls.EMPTY_CART)

    @classmethod
    def items_not_found(cls, names: list[str]) -> "CheckoutValidationError":
        return cls(
            f"These items are not on our menu: {', '.join(names)}",
            cls.ITEMS_NOT_FOUND,
            names=names,
        )


class PaymentConfigurationError(PaymentError):
    """The payment processor is not configured."""

    status_code = 500

    def __init__(self, message: str, code: str | None = "PROCESSOR_UNAVAILABLE") -> None:
        super().__init__(message, code)


class PaymentProcessorError(PaymentError):
    """The payment processor rejected or failed the request."""

    status_code = 502

    def __init__(
        self,
        message: str,
        code: str | None = "PROCESSOR_ERROR",
        processor_code: str | None = None,
    ) -> None:
        super().__init__(message, code)
        self.processor_code = processor_code
