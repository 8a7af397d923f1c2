class NvmeMuninError(RuntimeError):
    """Base class for errors raised by the NVMe plugin."""


class UnknownSizeUnitError(NvmeMuninError, ValueError):
    """
    A capacity string from `nvme list` could not be converted to bytes.

    This is not a soft parse problem: guessing a multiplier would silently
    corrupt the usage and write cycle metrics, so it is never caught.
    """

    def __init__(self, text: str) -> None:
        super().__init__(f"cannot convert size {text!r} to bytes")
        self.text = text
