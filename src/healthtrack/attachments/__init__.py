"""Attachment upload protocol components."""

from healthtrack.attachments.issuer import UploadAuthorizationIssuer
from healthtrack.attachments.keys import StorageKeyCodec
from healthtrack.attachments.lifecycle import AttachmentLifecycleManager
from healthtrack.attachments.reconciler import ConfirmationReconciler
from healthtrack.attachments.resolver import PresignedAccessResolver

__all__ = [
    "AttachmentLifecycleManager",
    "ConfirmationReconciler",
    "PresignedAccessResolver",
    "StorageKeyCodec",
    "UploadAuthorizationIssuer",
]
