from search_core.config import ScoringConfig
from search_core.retrieval.scoring import FuzzyRelevanceScorer
from search_core.types import SearchHit


def test_similarity_requires_in_order_characters() -> None:
    scorer = FuzzyRelevanceScorer()

    assert scorer.similarity("eks", "unrelated") is None
    assert scorer.similarity("kubernetes", "KUBE rnetes") == 60.0
    assert scorer.similarity("", "text") is None


def test_match_field_exact_and_fuzzy_points() -> None:
    scorer = FuzzyRelevanceScorer()

    exact = scorer.match_field("Kubernetes guide", "kubernetes")
    fuzzy = scorer.match_field("kube rnetes guide", "kubernetes")
    miss = scorer.match_field("holiday calendar", "kubernetes")

    assert exact.score == 100.0 and exact.matched
    assert fuzzy.score == 30.0 and fuzzy.matched
    assert miss.score == 0.0 and not miss.matched


def test_match_field_requires_sixty_percent_of_terms() -> None:
    scorer = FuzzyRelevanceScorer()

    two_of_three = scorer.match_field("eks cluster", "eks cluster zzz")
    one_of_two = scorer.match_field("eks", "eks zzz")

    assert two_of_three.matched
    assert round(two_of_three.score, 4) == round(200 / 3, 4)
    assert not one_of_two.matched


def test_score_combines_title_excerpt_and_bonuses() -> None:
    scorer = FuzzyRelevanceScorer()

    # title: 3 * 100 + 50 matched bonus, excerpt: 100, phrase bonus: 30
    assert scorer.score("EKS upgrade", "Steps for an eks upgrade", "eks upgrade") == 480
    # title only, no phrase bonus because terms are not contiguous
    assert scorer.score("upgrade of eks", "", "eks upgrade") == 350


def test_score_without_fields_is_zero() -> None:
    scorer = FuzzyRelevanceScorer()

    assert scorer.score("", "", "kubernetes") == 0
    assert scorer.score(None, None, "kubernetes") == 0


def test_exact_title_beats_unrelated_title() -> None:
    scorer = FuzzyRelevanceScorer()

    related = scorer.score("kubernetes eks setup", "", "kubernetes eks")
    unrelated = scorer.score("unrelated", "", "kubernetes eks")

    assert related == 380
    assert unrelated == 0
    assert related > unrelated


def test_fuzzy_threshold_is_configurable() -> None:
    strict = FuzzyRelevanceScorer(ScoringConfig(fuzzy_threshold=90.0))

    assert strict.match_field("kube rnetes", "kubernetes").matched is False


def test_score_hits_attaches_scores_in_place() -> None:
    scorer = FuzzyRelevanceScorer()
    hits = [
        SearchHit(source="Box", title="EKS runbook", excerpt="eks upgrade notes"),
        SearchHit(source="Box", title="Payroll", excerpt="Quarterly payroll export"),
    ]

    returned = scorer.score_hits(hits, "eks")

    assert returned is hits
    assert hits[0].relevance_score > 10
    assert hits[1].relevance_score == 0
