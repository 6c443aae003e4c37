"""Error kinds raised across the tutoring engine."""


class LingoSphereError(Exception):
    """Base class for all engine errors."""


class GenerationError(LingoSphereError):
    """The content generator could not produce usable content."""


class GenerationTransportError(GenerationError):
    """Network failure, quota, auth or any error from the model service."""


class GenerationDecodeError(GenerationError):
    """The model responded but the content does not match the requested shape."""


MalformedResponse = GenerationDecodeError


class ValidationInputRejected(LingoSphereError, ValueError):
    """The learner's answer is blank or otherwise unusable."""


class PersistenceDecodeError(LingoSphereError):
    """A stored session record could not be parsed."""


class CaptureUnavailable(LingoSphereError):
    """Speech capture is unsupported or permission was denied."""


class SurfaceBusyError(LingoSphereError):
    """An action was attempted while the surface has a request in flight."""
