"""Improvement recommendations derived from a policy-maturity assessment."""

from __future__ import annotations

from src.schemas.maturity import PolicyRecommendation, PolicyThemeScore, SchoolPolicyMaturity, SubScore

# Sub-indicators scoring below this get their own recommendation.
SUB_SCORE_THRESHOLD = 50

PRIORITY_ORDER: dict[str, int] = {"high": 3, "medium": 2, "low": 1}

THEME_RECOMMENDATIONS: dict[str, dict] = {
    "vision_planning": {
        "title": "Develop Comprehensive ICT Education Strategy",
        "description": "Create a clear vision and strategic plan for ICT integration in education",
        "action_items": [
            "Conduct stakeholder consultations to define ICT education vision",
            "Develop measurable goals and targets for ICT integration",
            "Establish coordination mechanisms across sectors",
            "Secure sustainable funding commitments",
        ],
        "timeline": "6-12 months",
        "resources": ["Policy development team", "Stakeholder engagement budget", "Technical expertise"],
        "expected_impact": "Foundation for systematic ICT education development",
    },
    "ict_infrastructure": {
        "title": "Strengthen ICT Infrastructure Foundation",
        "description": "Improve basic ICT infrastructure including electricity, devices, and support systems",
        "action_items": [
            "Conduct infrastructure needs assessment",
            "Develop device procurement and distribution plan",
            "Establish technical support systems",
            "Ensure reliable electricity access",
        ],
        "timeline": "12-24 months",
        "resources": ["Infrastructure budget", "Technical support staff", "Maintenance contracts"],
        "expected_impact": "Reliable ICT infrastructure enabling effective teaching and learning",
    },
    "teachers": {
        "title": "Build Teacher ICT Capacity",
        "description": "Develop comprehensive teacher training and support systems for ICT integration",
        "action_items": [
            "Design ICT competency framework for teachers",
            "Implement systematic teacher training programs",
            "Establish teacher support networks",
            "Integrate ICT skills in teacher certification",
        ],
        "timeline": "18-36 months",
        "resources": ["Training budget", "Master trainers", "Learning materials", "Support infrastructure"],
        "expected_impact": "Teachers equipped with skills and confidence to integrate ICT effectively",
    },
    "skills_competencies": {
        "title": "Develop Student Digital Competencies",
        "description": "Implement comprehensive digital literacy and 21st-century skills curriculum",
        "action_items": [
            "Develop age-appropriate digital literacy curriculum",
            "Train teachers in digital skills pedagogy",
            "Integrate digital competencies across subjects",
            "Establish assessment frameworks for digital skills",
        ],
        "timeline": "12-24 months",
        "resources": ["Curriculum development team", "Teacher training", "Assessment tools"],
        "expected_impact": "Students equipped with essential digital skills for future success",
    },
    "learning_resources": {
        "title": "Expand Digital Learning Resources",
        "description": "Develop and curate high-quality digital content aligned with curriculum",
        "action_items": [
            "Establish digital content repository",
            "Develop curriculum-aligned digital resources",
            "Implement content quality assurance processes",
            "Train teachers in digital content integration",
        ],
        "timeline": "12-18 months",
        "resources": ["Content development team", "Technology platform", "Quality assurance processes"],
        "expected_impact": "Rich digital learning environment supporting improved educational outcomes",
    },
    "emis": {
        "title": "Implement Comprehensive EMIS",
        "description": "Establish robust education management information systems",
        "action_items": [
            "Design integrated EMIS architecture",
            "Implement data collection and management systems",
            "Train staff in EMIS use and maintenance",
            "Establish data governance and privacy policies",
        ],
        "timeline": "18-30 months",
        "resources": ["EMIS development team", "Technology infrastructure", "Training programs"],
        "expected_impact": "Data-driven decision making and improved education system management",
    },
    "monitoring_evaluation": {
        "title": "Establish M&E Framework",
        "description": "Implement systematic monitoring and evaluation of ICT education initiatives",
        "action_items": [
            "Develop M&E framework with clear indicators",
            "Establish baseline data collection systems",
            "Implement regular assessment and evaluation cycles",
            "Build capacity for evidence-based decision making",
        ],
        "timeline": "12-18 months",
        "resources": ["M&E specialists", "Data collection tools", "Analysis capacity"],
        "expected_impact": "Continuous improvement based on evidence and systematic learning",
    },
    "equity_inclusion_safety": {
        "title": "Ensure Equitable and Safe ICT Access",
        "description": "Address digital divides and ensure safe, inclusive ICT education",
        "action_items": [
            "Conduct equity analysis and gap assessment",
            "Develop targeted interventions for disadvantaged groups",
            "Implement digital safety and citizenship curriculum",
            "Establish inclusive design principles for ICT initiatives",
        ],
        "timeline": "12-24 months",
        "resources": ["Equity analysis team", "Targeted intervention budget", "Safety curriculum"],
        "expected_impact": "Inclusive ICT education benefiting all students regardless of background",
    },
}


def _theme_recommendation(theme: PolicyThemeScore) -> PolicyRecommendation | None:
    template = THEME_RECOMMENDATIONS.get(theme.code)
    if template is None:
        return None
    priority = "high" if theme.stage == "Latent" else "medium"
    return PolicyRecommendation(theme_code=theme.code, priority=priority, **template)


def _sub_score_recommendation(theme_code: str, sub_score: SubScore) -> PolicyRecommendation:
    name = sub_score.name
    return PolicyRecommendation(
        theme_code=theme_code,
        priority="medium",
        title=f"Improve {name}",
        description=f"Address gaps in {name} to advance policy maturity",
        action_items=[
            f"Assess current state of {name}",
            "Develop improvement plan",
            "Implement targeted interventions",
            "Monitor progress and adjust as needed",
        ],
        timeline="6-12 months",
        resources=["Technical expertise", "Implementation budget", "Monitoring systems"],
        expected_impact=f"Enhanced {name} contributing to overall policy advancement",
    )


def generate_policy_recommendations(maturity: SchoolPolicyMaturity) -> list[PolicyRecommendation]:
    """Return recommendations for weak themes and sub-indicators, high priority first.

    A theme at ``Latent`` or ``Emerging`` gets its framework recommendation
    (high priority when Latent).  Each sub-indicator scoring below 50 gets a
    generic medium-priority recommendation.
    """
    recommendations: list[PolicyRecommendation] = []

    for theme in maturity.core_themes():
        if theme.stage in ("Latent", "Emerging"):
            recommendation = _theme_recommendation(theme)
            if recommendation is not None:
                recommendations.append(recommendation)

        for sub_score in theme.sub_scores.values():
            if sub_score.score < SUB_SCORE_THRESHOLD:
                recommendations.append(_sub_score_recommendation(theme.code, sub_score))

    # sorted() is stable, so order within a priority follows theme order
    return sorted(recommendations, key=lambda r: PRIORITY_ORDER[r.priority], reverse=True)
