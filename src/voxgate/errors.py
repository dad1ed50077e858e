"""Exception hierarchy for voxgate."""


class VoxgateError(Exception):
    """Base class for all voxgate errors."""


class ConfigurationError(VoxgateError, ValueError):
    """Invalid segmentation or model configuration, raised at construction."""


class InferenceContractViolation(VoxgateError, RuntimeError):
    """The probability model returned output that breaks the infer() contract."""


class InvalidFrameLength(VoxgateError, ValueError):
    """A frame handed to the window assembler has the wrong number of samples."""

    def __init__(self, expected: int, actual: int):
        super().__init__(f"Expected a frame of {expected} samples, got {actual}")
        self.expected = expected
        self.actual = actual


class AudioFormatError(VoxgateError, ValueError):
    """Audio input that cannot be segmented as-is (encoding, channels, rate)."""
