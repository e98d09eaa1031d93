from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass
class ScoringRules:
    line_clear_scores: tuple[int, int, int, int] = (40, 100, 300, 1200)
    tetris_bonus: int = 400
    soft_drop_points: int = 1
    hard_drop_points: int = 2
    combo_points: int = 50
    quick_drop_window_ms: float = 1000.0
    quick_drop_points: int = 200
    perfect_clear_points: int = 3000
    early_level_cap: int = 3
    early_level_multiplier: float = 1.5
    base_delay_ms: int = 400

    def __post_init__(self) -> None:
        if self.base_delay_ms <= 0:
            raise ValueError(f"base_delay_ms must be positive, got {self.base_delay_ms}")

    def base_points(self, lines: int, level: int) -> int:
        if lines <= 0:
            return 0
        lines = min(lines, 4)
        points = self.line_clear_scores[lines - 1] * level
        if lines == 4:
            points += self.tetris_bonus
        return points

    def combo_bonus(self, combo: int, level: int) -> int:
        if combo > 1:
            return self.combo_points * combo * level
        return 0

    def quick_drop_bonus(self, elapsed_ms: Optional[float]) -> int:
        """Bonus for clearing again shortly after the previous clear."""
        if elapsed_ms is None or elapsed_ms >= self.quick_drop_window_ms:
            return 0
        return int(round(self.quick_drop_points * (1 - elapsed_ms / self.quick_drop_window_ms)))

    def score_for_clear(
        self,
        lines: int,
        level: int,
        combo: int,
        elapsed_ms: Optional[float] = None,
        perfect_clear: bool = False,
    ) -> int:
        """Points for one clearing lock.

        ``level`` is the level before the clear is counted and ``combo`` the
        already incremented combo counter. The early-level multiplier applies
        to the whole total, perfect-clear bonus included.
        """
        total = self.base_points(lines, level)
        total += self.combo_bonus(combo, level)
        total += self.quick_drop_bonus(elapsed_ms)
        if perfect_clear:
            total += self.perfect_clear_points * level
        if level <= self.early_level_cap:
            total = int(total * self.early_level_multiplier)
        return total

    def level_for_lines(self, lines: int) -> int:
        # 3 lines per level up to 9, then 5 per level up to 24, then 10
        if lines < 9:
            return lines // 3 + 1
        if lines < 24:
            return (lines - 9) // 5 + 4
        return (lines - 24) // 10 + 7

    def delay_for_level(self, level: int) -> int:
        if level <= 3:
            return max(self.base_delay_ms - (level - 1) * 30, 300)
        if level <= 7:
            return max(300 - (level - 4) * 40, 180)
        return max(180 - (level - 8) * 20, 100)
