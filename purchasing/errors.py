class PurchasingError(Exception):
    """Base class for errors raised by the purchasing engine."""


class ReferenceDataError(PurchasingError):
    """The static reference tables (lead times, vendor directory) are unusable."""


class UnknownRecordTypeError(PurchasingError):
    """A mapping or signature was requested for a record type that is not declared."""

    def __init__(self, record_type: str):
        super().__init__(f"Unknown record type: {record_type!r}")
        self.record_type = record_type


class FileLoadError(PurchasingError):
    """A CSV file could not be read with any of the supported encodings."""
