"""Git gone-branch pruning tool.

Features:
- Fetch with prune so remote-tracking branches match the server
- Find local branches whose upstream branch is gone
- Interactive selection of the branches to delete
- Branch protection from a config file or built-in defaults
- Confirmed force delete for branches with unmerged changes
- Dry run mode
"""

__version__ = "0.1.0"
