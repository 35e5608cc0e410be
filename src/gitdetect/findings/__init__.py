"""Finding models, identity, and aggregation."""

from gitdetect.findings.aggregator import add_instance, reduce_and_exploit, relative_filename
from gitdetect.findings.identity import secret_id
from gitdetect.findings.models import Defect, FileDefects, FileRepo, Report, Secret

__all__ = [
    "Defect",
    "FileDefects",
    "FileRepo",
    "Report",
    "Secret",
    "add_instance",
    "reduce_and_exploit",
    "relative_filename",
    "secret_id",
]
