"""
Tests for the achievement catalog and its evaluation against a history.
"""
from __future__ import annotations

from critiquelab.services.achievements import CATALOG, evaluate_achievements


def _by_id(achievements):
    return {a.id: a for a in achievements}


class TestCatalog:
    def test_ten_badges_in_fixed_order(self):
        assert [d.id for d in CATALOG] == [
            "first_blood",
            "five_rounds",
            "twenty_rounds",
            "sharpshooter",
            "masterclass",
            "iron_logic",
            "crystal_clear",
            "streak_3",
            "streak_7",
            "all_sources",
        ]

    def test_ids_unique(self):
        assert len({d.id for d in CATALOG}) == len(CATALOG)


class TestEvaluate:
    def test_empty_history_unlocks_nothing(self):
        result = evaluate_achievements([])
        assert len(result) == len(CATALOG)
        assert not any(a.unlocked for a in result)
        assert all(a.unlocked_at is None for a in result)

    def test_single_ordinary_score_unlocks_first_blood_only(self, make_record):
        record = make_record(50)
        result = _by_id(evaluate_achievements([record]))
        unlocked = {k for k, a in result.items() if a.unlocked}
        assert unlocked == {"first_blood"}
        assert result["first_blood"].unlocked_at == record.created_at

    def test_score_thresholds_are_inclusive(self, make_record):
        result = _by_id(evaluate_achievements([make_record(80)]))
        assert result["sharpshooter"].unlocked
        assert not result["masterclass"].unlocked

        result = _by_id(evaluate_achievements([make_record(90)]))
        assert result["masterclass"].unlocked

    def test_perfect_categories(self, make_record):
        result = _by_id(evaluate_achievements([
            make_record(clarity=25, logic=10, evidence=10, defense=10),
            make_record(clarity=10, logic=25, evidence=10, defense=10, minute_offset=1),
        ]))
        assert result["crystal_clear"].unlocked
        assert result["iron_logic"].unlocked

    def test_count_badges(self, make_record):
        scores = [make_record(50, minute_offset=i) for i in range(5)]
        result = _by_id(evaluate_achievements(scores))
        assert result["five_rounds"].unlocked
        assert not result["twenty_rounds"].unlocked
        # unlocked by the fifth record in time order
        assert result["five_rounds"].unlocked_at == scores[4].created_at

    def test_streak_badges(self, make_record):
        scores = [make_record(50, day_offset=d) for d in range(7)]
        result = _by_id(evaluate_achievements(scores))
        assert result["streak_3"].unlocked
        assert result["streak_3"].unlocked_at == scores[2].created_at
        assert result["streak_7"].unlocked

    def test_all_sources(self, make_record):
        scores = [
            make_record(50, source="critique", minute_offset=0),
            make_record(50, source="coach", minute_offset=1),
        ]
        assert not _by_id(evaluate_achievements(scores))["all_sources"].unlocked

        scores.append(make_record(50, source="autopsy", minute_offset=2))
        result = _by_id(evaluate_achievements(scores))
        assert result["all_sources"].unlocked
        assert result["all_sources"].unlocked_at == scores[2].created_at

    def test_unlocked_at_uses_time_order_not_list_order(self, make_record):
        high_later = make_record(95, day_offset=3)
        high_earlier = make_record(92, day_offset=1)
        result = _by_id(evaluate_achievements([high_later, high_earlier]))
        assert result["masterclass"].unlocked_at == high_earlier.created_at

    def test_deleting_scores_relocks(self, make_record):
        scores = [make_record(50, minute_offset=i) for i in range(5)]
        assert _by_id(evaluate_achievements(scores))["five_rounds"].unlocked
        assert not _by_id(evaluate_achievements(scores[1:]))["five_rounds"].unlocked
