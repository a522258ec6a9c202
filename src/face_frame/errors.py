"""Error taxonomy for the capture and detection workflows.

The geometric core never raises; these errors come from the camera, cropper
and gallery collaborators and are caught at the workflow boundary.
"""


class FaceFrameError(Exception):
    """Base class for all face-frame errors."""


class PermissionDeniedError(FaceFrameError):
    """Camera or storage access was refused. Recoverable by asking again."""


class NoCameraDeviceError(FaceFrameError):
    """No usable camera device. Fatal for the session."""


class WorkflowError(FaceFrameError):
    """A single capture workflow step failed.

    The workflow reports it as a transient message and returns to idle.
    """


class CaptureFailure(WorkflowError):
    """Taking the photo failed."""


class CropFailure(WorkflowError):
    """Cropping the photo to the guide frame failed."""


class SaveFailure(WorkflowError):
    """Writing the cropped photo to the gallery failed."""
