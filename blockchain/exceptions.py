class ProvenanceError(Exception):
    """Base class for every error raised by the provenance ledger."""


class InvalidInput(ProvenanceError):
    """Registration data is missing, empty or malformed."""

    def __init__(self, message, errors=None):
        super().__init__(message)
        self.message = message
        self.errors = errors or {}


class DuplicateRegistration(ProvenanceError):
    """The distributor key is already mapped to a product."""

    def __init__(self, origin_key, product_id):
        super().__init__(f"Product already synced: {origin_key} -> {product_id}")
        self.origin_key = origin_key
        self.product_id = product_id


class NotFound(ProvenanceError):
    def __init__(self, product_id):
        super().__init__(f"Product {product_id} not found")
        self.product_id = product_id


class StorageUnavailable(ProvenanceError):
    """The product store could not complete the operation."""
