from .diff import Insert, Unchanged, Update, compute_diff
from .reconciler import ReconcileResult, Reconciler

__all__ = ["Insert", "Unchanged", "Update", "compute_diff", "ReconcileResult", "Reconciler"]
