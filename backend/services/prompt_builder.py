"""All prompt templates for the Gemini judging call."""

import json

from models.schemas.integration import IntegrationSignal
from models.schemas.project import Project
from models.schemas.repository import RepositorySignal

# Criterion weights in percent; the weighted base score is sum(score * weight / 100)
SCORING_CRITERIA: dict[str, int] = {
    "technical_implementation": 25,
    "innovation": 20,
    "value_proposition": 20,
    "completeness": 15,
    "market_potential": 10,
    "code_quality": 10,
}

SYSTEM_PROMPT = """You are an elite hackathon judge with 15+ years of experience evaluating top-tier technical projects. Your standards are exceptionally high.

CRITICAL EVALUATION PRINCIPLES:
1. EXCELLENCE IS RARE: Only 5-10% of projects should score above 85. Most projects are good but not exceptional.
2. INNOVATION MUST BE PROVEN: Claims of "AI-powered" or "blockchain-based" mean nothing without technical depth.
3. EXECUTION OVER IDEAS: A well-executed simple idea beats a poorly executed complex one.
4. MARKET VALIDATION REQUIRED: Grand claims about market size need evidence or validation.
5. CODE QUALITY MATTERS: GitHub presence, documentation, and architecture are crucial.
6. COMMIT HISTORY IS CRITICAL: Few commits indicate template usage or lack of real development.

STRICT SCORING GUIDELINES:

Technical Implementation (25%):
- 90-100: Advanced algorithms, complex system architecture, cutting-edge technology. Senior-level engineering.
- 80-89: Solid technical implementation with complexity. Good engineering practices evident.
- 70-79: Functional implementation meeting basic requirements. Standard approaches used competently.
- 60-69: Basic functionality working but with technical limitations or shortcuts.
- 0-59: Significant technical issues, incomplete implementation, or broken functionality.

Innovation & Uniqueness (20%):
- 90-100: Breakthrough concept or truly novel approach. Never seen before.
- 80-89: Creative combination of existing technologies. Clear originality.
- 70-79: Some innovative elements but builds heavily on existing solutions.
- 60-69: Minor improvements to existing approaches.
- 0-59: Standard solution with no innovative elements.

Value Proposition (20%):
- 90-100: Solves a major problem with clear, validated demand.
- 80-89: Addresses an important problem with good solution fit.
- 70-79: Decent problem-solution fit but limited evidence of demand.
- 60-69: Problem exists but solution may not be optimal or market unclear.
- 0-59: Weak problem definition or the solution does not address the need.

Project Completeness (15%):
- 85-100: Production-ready quality with polish and error handling.
- 70-84: Most planned features implemented and working. Good demo quality.
- 60-69: Core functionality complete but lacking polish.
- 45-59: Basic functionality present but significant gaps.
- 0-44: Incomplete project with major missing pieces.

Market/Consumer Potential (10%):
- 90-100: Large addressable market with clear monetization path.
- 80-89: Good market opportunity with a reasonable path to adoption.
- 70-79: Decent potential but uncertain adoption or competition.
- 60-69: Limited market or unclear path to adoption.
- 0-59: Very niche market or no commercialization path.

Code Quality & Documentation (10%):
- 85-100: Exemplary structure, comprehensive documentation, best practices throughout.
- 70-84: Good organization with decent documentation.
- 60-69: Functional code with basic documentation.
- 45-59: Working code but poor structure or minimal documentation.
- 0-44: Poor code quality, no documentation, or code not accessible.

AUTOMATIC PENALTIES (applied after your scoring, do not apply them yourself):
- No GitHub link: -15 points
- <=2 commits: -20 points (template usage)
- 3-5 commits: -15 points (very limited development)
- No demo links: -10 points
- Incomplete/poor description: -8 points
- Solo project: -3 points
- No recent commits (30+ days): -10 points

BONUSES:
- Base mainnet integration: +8 points
- Base testnet integration: +5 points
- 20+ meaningful commits: +5 points
- Excellent repository health: +5 points

BE HARSH BUT FAIR. Most projects should score 60-80. Only truly exceptional projects deserve 85+."""


def _repository_summary(repo_signal: RepositorySignal | None) -> dict | None:
    if repo_signal is None:
        return None
    return {
        "total_commits": repo_signal.total_commits,
        "commit_quality": repo_signal.quality_score,
        "recent_activity": repo_signal.recent_activity,
        "health_score": repo_signal.health_score,
        "issues": repo_signal.issues,
    }


def build_project_payload(
    project: Project,
    repo_signal: RepositorySignal | None,
    integration: IntegrationSignal,
) -> dict:
    """Compact, JSON-serialisable view of the project and its signals."""
    return {
        "name": project.name,
        "tagline": project.tagline,
        "description": [
            {"title": d.title, "content": d.content} for d in project.description
        ],
        "has_github_link": project.has_github_link,
        "links": project.links,
        "prize_tracks": [t.name for t in project.prize_tracks],
        "hashtags": [h.name for h in project.hashtags],
        "team_size": len(project.members),
        "views": project.views,
        "likes": project.likes,
        "github_analysis": _repository_summary(repo_signal),
        "base_analysis": {
            "network_type": integration.network_type,
            "has_base_indicators": integration.has_indicators,
        },
    }


def _github_section(repo_signal: RepositorySignal | None) -> str:
    if repo_signal is None:
        return "No GitHub repository found or analysis failed"
    analysis = repo_signal.commit_analysis
    return f"""Repository: {repo_signal.repository_name}
Total Commits: {repo_signal.total_commits}
Commit Quality Score: {analysis.quality_score}/100
Recent Activity: {analysis.recent_activity}
Repository Health: {repo_signal.health_score}/100
Issues Found: {', '.join(analysis.issues) or 'none'}
Meaningful Commits: {analysis.meaningful_commits}
Template Indicators: {analysis.template_indicators}"""


def build_judge_prompt(
    project: Project,
    repo_signal: RepositorySignal | None,
    integration: IntegrationSignal,
) -> str:
    """User prompt for one project; pair with SYSTEM_PROMPT as system instruction."""
    payload = json.dumps(build_project_payload(project, repo_signal, integration), indent=2)

    return f"""Evaluate this hackathon project with STRICT STANDARDS. Be harsh but fair. Focus on execution quality and genuine development activity.

PROJECT DATA:
{payload}

GITHUB ANALYSIS:
{_github_section(repo_signal)}

BASE INTEGRATION:
Network Type: {integration.network_type}
Base Integration: {integration.has_indicators}

CRITICAL EVALUATION POINTS:
1. If commits <= 2: This is likely template usage - score harshly
2. If commits 3-5: Very limited development - significant penalty
3. If no recent activity: Project may be abandoned
4. Innovation claims must be backed by technical depth
5. Base integration is a bonus, not a requirement

Respond with ONLY valid JSON (no markdown, no code fences) in this exact structure:
{{
  "overall_score": <number 0-100>,
  "breakdown": {{
    "technical_implementation": <number 0-100>,
    "innovation": <number 0-100>,
    "value_proposition": <number 0-100>,
    "completeness": <number 0-100>,
    "market_potential": <number 0-100>,
    "code_quality": <number 0-100>,
    "network_integration": <number 0-100, optional>,
    "ecosystem_fit": <number 0-100, optional>
  }},
  "reasoning": "<detailed explanation focusing on commit analysis and execution quality>",
  "flags": [<specific issues found>],
  "confidence": <number 0.7-1.0>
}}"""
