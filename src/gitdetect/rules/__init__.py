"""Rule engine — compiled rule model and compiler."""

from gitdetect.rules.compiler import compile_rule, compile_rules, load_detection_rules
from gitdetect.rules.models import TARGET_GROUP_NAME, Rule

__all__ = ["Rule", "TARGET_GROUP_NAME", "compile_rule", "compile_rules", "load_detection_rules"]
