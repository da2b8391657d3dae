from abc import ABC, abstractmethod
from typing import Sequence, Union

from dir2prompt.types import PathType


class BaseExclusionRules(ABC):
    """
    Abstract base class for rules that hide entries from the browsable tree.

    The directory loader consults the rules for every entry it reads. An excluded
    entry never becomes a node, so it can be neither displayed nor selected.
    Loading rules from files and adding single rules are optional capabilities.

    Example:
        >>> from dir2prompt.exclusion_rules.git_rules import GitIgnoreExclusionRules
        >>> rules = GitIgnoreExclusionRules()
        >>> rules.add_rule('__pycache__/')
        >>> rules.exclude('pkg/__pycache__/')
        True
        >>> rules.exclude('pkg/module.py')
        False
    """

    @abstractmethod
    def exclude(self, path: str) -> bool:
        """
        Determine if a given path should be hidden.

        Args:
            path (str): Path relative to the tree root, using forward slashes. Directory
                paths carry a trailing slash.

        Returns:
            bool: True if the path should be excluded, False if it should be shown.
        """
        pass

    def load_rules(self, rules_files: Union[PathType, Sequence[PathType]]) -> None:
        """
        Load and parse exclusion rules from one or more files.

        Args:
            rules_files: Path to a file or sequence of paths containing exclusion rules.

        Raises:
            NotImplementedError: If this rule type doesn't support loading from files.
            FileNotFoundError: If any rules file does not exist.
        """
        raise NotImplementedError(f"{self.__class__.__name__} doesn't support loading rules from files.")

    def add_rule(self, rule: str) -> None:
        """
        Add a single exclusion rule directly.

        Args:
            rule (str): The exclusion rule to add.

        Raises:
            NotImplementedError: If this rule type doesn't support adding individual rules.
        """
        raise NotImplementedError(f"{self.__class__.__name__} doesn't support adding individual rules.")
