"""Decision engine for declguard."""

from declguard.engine.classifier import DeclarationClassifier, is_suffix_exempt
from declguard.engine.matcher import CompiledPattern, PatternMatcher, is_file_allowed, normalize_path
from declguard.engine.policy import (
    NODE_KINDS,
    RECOMMENDED_CONFIG,
    RULE_META,
    RULE_NAME,
    FileScope,
    PolicyEngine,
    render_message,
)

__all__ = [
    "NODE_KINDS",
    "RECOMMENDED_CONFIG",
    "RULE_META",
    "RULE_NAME",
    "CompiledPattern",
    "DeclarationClassifier",
    "FileScope",
    "PatternMatcher",
    "PolicyEngine",
    "is_file_allowed",
    "is_suffix_exempt",
    "normalize_path",
    "render_message",
]
