"""
Checkers package: one class per style rule.
"""

from .naming_checker import NamingChecker
from .abbreviation_checker import AbbreviationChecker
from .formatting_checker import FormattingChecker
from .modifier_checker import ModifierChecker
from .comment_checker import CommentStyleChecker
from .using_checker import UsingOrderChecker
from .member_order_checker import MemberOrderChecker
from .file_name_checker import FileNameChecker

# Registry in reporting order. Checkers are stateless and shared across threads.
ALL_CHECKERS = (
    NamingChecker(),
    AbbreviationChecker(),
    FormattingChecker(),
    ModifierChecker(),
    CommentStyleChecker(),
    UsingOrderChecker(),
    MemberOrderChecker(),
    FileNameChecker(),
)

RULE_IDS = tuple(checker.rule_id for checker in ALL_CHECKERS)

__all__ = [
    'ALL_CHECKERS',
    'RULE_IDS',
    'NamingChecker',
    'AbbreviationChecker',
    'FormattingChecker',
    'ModifierChecker',
    'CommentStyleChecker',
    'UsingOrderChecker',
    'MemberOrderChecker',
    'FileNameChecker',
]
