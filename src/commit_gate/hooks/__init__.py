"""Hook pipeline: staged file discovery, task execution and result aggregation.

Every staged file runs through the enabled file tasks, then repo tasks run
once over the matching staged files. Task outcomes are merged on a ranked
result scale so the final verdict does not depend on evaluation order:

    clean < has_changes < has_unstaged_changes < rejected

Only ``clean`` and ``has_changes`` let the commit proceed.
"""
