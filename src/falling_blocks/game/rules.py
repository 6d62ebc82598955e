from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ScoringRules:
    line_clear_scores: tuple[int, int, int, int] = (100, 300, 500, 800)
    points_per_level: int = 500

    def score_for_lines(self, lines: int) -> int:
        if lines == 0:
            return 0
        if 1 <= lines <= 4:
            return self.line_clear_scores[lines - 1]
        raise ValueError(f"a single lock clears 0-4 rows, got {lines}")

    def level_for_score(self, score: int) -> int:
        return score // self.points_per_level + 1
