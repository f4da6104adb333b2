"""
Join Executor for MiniRDBMS
"""

from typing import Dict, List, Optional


class JoinExecutor:
    """Executes JOIN operations between row lists"""

    @staticmethod
    def inner_join(left_rows: List[Dict], right_rows: List[Dict],
                   left_col: Optional[str], right_col: Optional[str]) -> List[Dict]:
        """
        Nested loop inner equality join.
        One merged row per matching pair; right-hand fields win on name clashes.
        Left rows without a match are dropped.
        """
        results = []

        for left_row in left_rows:
            for right_row in right_rows:
                if left_row.get(left_col) == right_row.get(right_col):
                    merged = left_row.copy()
                    merged.update(right_row)
                    results.append(merged)

        return results
