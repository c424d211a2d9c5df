"""Range-based text patching."""

from .patch_applier import PatchApplier, apply_edits

__all__ = ["PatchApplier", "apply_edits"]
