"""
Evaluation Package — heuristic response quality scoring.

Provides:
  ResponseQualityAnalyzer — deterministic eight-metric scorer
  QualityMetrics          — per-metric scores + weighted overall score
  QualityAnalysis         — full result (labels, diagnostics, key points)

Usage::

    from app.evaluation import ResponseQualityAnalyzer

    analyzer = ResponseQualityAnalyzer()
    analysis = analyzer.analyze_response_quality(
        response="First, the food was great. Finally, I recommend it!",
        content_type="review",
        context={"topic": "food"},
    )
    print(analysis.overall_score, analysis.strengths, analysis.suggestions)
"""

from app.evaluation.quality import QualityAnalysis, QualityMetrics, ResponseQualityAnalyzer

__all__ = ["QualityAnalysis", "QualityMetrics", "ResponseQualityAnalyzer"]
