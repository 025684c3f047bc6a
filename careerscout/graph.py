"""LangGraph workflow — 8-node job discovery & matching pipeline."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, TypedDict

from langgraph.graph import END, StateGraph

from careerscout.agents.careers_resolver import resolve_careers_urls
from careerscout.agents.criteria_parser import parse_criteria
from careerscout.agents.cv_customizer import load_template_cv
from careerscout.agents.expansion import expand_companies, expand_roles
from careerscout.agents.orchestrator import JobDiscoveryOrchestrator
from careerscout.config import Settings
from careerscout.errors import BrowserSessionError, ValidationError
from careerscout.models.criteria import SearchCriteria, Submission
from careerscout.models.job import CompanyTarget
from careerscout.models.policy import ScreeningPolicy, load_policy
from careerscout.models.results import CompanyResult, RunSummary
from careerscout.report.notifier import dispatch_results
from careerscout.storage.database import SubmissionRepository
from careerscout.tools.browser import BrowserSession
from careerscout.tools.llm_client import CompletionClient, OfflineCompletionClient

logger = logging.getLogger(__name__)


# =============================================================================
# Pipeline State
# =============================================================================


class PipelineState(TypedDict, total=False):
    """State passed between nodes in the LangGraph pipeline."""

    # Config
    submission_id: str | None
    criteria_path: str | None
    dry_run: bool
    no_email: bool
    run_date: str

    # Data
    submission: Submission
    criteria: SearchCriteria
    companies: list[str]
    targets: list[CompanyTarget]
    template_cv: str
    summary: RunSummary

    # Outcome
    errors: list[str]
    email_sent: bool


class PipelineDeps:
    """Collaborators shared by the nodes of one compiled pipeline."""

    def __init__(
        self,
        settings: Settings,
        policy: ScreeningPolicy,
        client,
        browser_factory: Callable[[], Any],
    ) -> None:
        self.settings = settings
        self.policy = policy
        self.client = client
        self.browser_factory = browser_factory

    def client_for(self, state: PipelineState):
        if state.get("dry_run", False):
            return OfflineCompletionClient()
        return self.client


def _append_errors(state: PipelineState, notes: list[str]) -> list[str]:
    return list(state.get("errors", [])) + [n for n in notes if n]


# =============================================================================
# Node 1: Load Request
# =============================================================================


def load_request_node(state: PipelineState, deps: PipelineDeps) -> dict:
    """Read the submission from the store, or from a criteria file."""
    logger.info("=== Node 1: Loading Request ===")

    submission_id = state.get("submission_id")
    if submission_id:
        repo = SubmissionRepository(deps.settings.db_path)
        try:
            submission = repo.get_submission(submission_id)
        finally:
            repo.close()
        if submission is None:
            raise ValidationError(f"Submission not found: {submission_id}")
    else:
        submission = parse_criteria(state.get("criteria_path") or "criteria.md")

    logger.info("Loaded request %s for %s", submission.id or "-", submission.email or "(no email)")
    return {"submission": submission}


# =============================================================================
# Node 2: Validate Request
# =============================================================================


def validate_request_node(state: PipelineState, deps: PipelineDeps) -> dict:
    """Reject malformed requests before any browsing resource is acquired."""
    logger.info("=== Node 2: Validating Request ===")

    submission = state.get("submission")
    if submission is None:
        raise ValidationError("No request loaded")

    problems = []
    if not submission.companies:
        problems.append("at least one company is required")
    if not submission.roles:
        problems.append("at least one role is required")
    wants_email = not (state.get("no_email", False) or state.get("dry_run", False))
    if wants_email and "@" not in submission.email:
        problems.append("a valid email address is required")
    if problems:
        raise ValidationError("Invalid request: " + "; ".join(problems))

    return {"criteria": submission.to_criteria()}


# =============================================================================
# Node 3: Expand Companies
# =============================================================================


def expand_companies_node(state: PipelineState, deps: PipelineDeps) -> dict:
    logger.info("=== Node 3: Expanding Companies ===")

    submission = state["submission"]
    result = expand_companies(
        submission.companies,
        submission.roles,
        deps.client_for(state),
        max_companies=deps.settings.max_companies,
    )
    logger.info("Target list: %d companies", len(result.value))
    return {"companies": result.value, "errors": _append_errors(state, [result.reason or ""])}


# =============================================================================
# Node 4: Expand Roles
# =============================================================================


def expand_roles_node(state: PipelineState, deps: PipelineDeps) -> dict:
    logger.info("=== Node 4: Expanding Roles ===")

    criteria = state["criteria"]
    result = expand_roles(
        criteria.roles,
        deps.client_for(state),
        max_suggestions=deps.settings.max_role_suggestions,
    )
    return {
        "criteria": criteria.with_expanded_roles(result.value),
        "errors": _append_errors(state, [result.reason or ""]),
    }


# =============================================================================
# Node 5: Resolve Careers URLs
# =============================================================================


def resolve_careers_urls_node(state: PipelineState, deps: PipelineDeps) -> dict:
    logger.info("=== Node 5: Resolving Careers URLs ===")

    results = resolve_careers_urls(
        state.get("companies", []),
        deps.client_for(state),
        delay_s=0.0 if state.get("dry_run", False) else deps.settings.resolve_delay_secs,
    )
    fallbacks = [r.reason or "" for r in results if r.fell_back]
    logger.info("Resolved %d careers URLs (%d guessed)", len(results), len(fallbacks))
    return {
        "targets": [r.value for r in results],
        "errors": _append_errors(state, fallbacks),
    }


# =============================================================================
# Node 6: Load Template CV
# =============================================================================


def load_template_node(state: PipelineState, deps: PipelineDeps) -> dict:
    logger.info("=== Node 6: Loading Template CV ===")
    return {"template_cv": load_template_cv(state["submission"].template_path)}


# =============================================================================
# Node 7: Discover Jobs
# =============================================================================


def discover_jobs_node(state: PipelineState, deps: PipelineDeps) -> dict:
    """Crawl every careers page, score postings and tailor CVs for matches."""
    logger.info("=== Node 7: Discovering Jobs ===")

    targets = state.get("targets", [])
    summary = RunSummary()
    notes: list[str] = []

    try:
        with deps.browser_factory() as browser:
            orchestrator = JobDiscoveryOrchestrator(
                browser=browser,
                client=deps.client_for(state),
                criteria=state["criteria"],
                template_cv=state.get("template_cv", ""),
                settings=deps.settings,
                policy=deps.policy,
            )
            orchestrator.run(targets, summary)
            notes.extend(orchestrator.notes)
    except BrowserSessionError as e:
        # Launch failed before any company ran, or the session died outside a company.
        logger.error("Browser session failed: %s", e)
        done = {r.company for r in summary.results}
        for target in targets:
            if target.company not in done:
                summary.add(
                    CompanyResult.error(target.company, target.careers_url, f"Browser session unavailable: {e}")
                )
        summary.finalize()
        notes.append(f"Browser session failed: {e}")

    logger.info(
        "Discovery complete: %d companies, %d with matches, %d without, %d errors",
        summary.total_companies,
        summary.successful_matches,
        summary.no_matches,
        summary.errors,
    )
    return {"summary": summary, "errors": _append_errors(state, notes)}


# =============================================================================
# Node 8: Notify
# =============================================================================


def notify_node(state: PipelineState, deps: PipelineDeps) -> dict:
    """Hand the results to the notification dispatcher."""
    logger.info("=== Node 8: Notify ===")

    if state.get("no_email", False):
        logger.info("Email sending disabled (--no-email)")
        return {"email_sent": False}
    if state.get("dry_run", False):
        logger.info("Dry run — skipping email send")
        return {"email_sent": False}

    try:
        sent = dispatch_results(
            state["submission"].email,
            state["criteria"],
            state["summary"],
            deps.settings,
        )
        return {"email_sent": sent}
    except Exception as e:
        logger.error("Failed to send email: %s", e)
        return {"email_sent": False, "errors": _append_errors(state, [f"Email send failed: {e}"])}


# =============================================================================
# Build the Graph
# =============================================================================

NODES: list[tuple[str, Callable[[PipelineState, PipelineDeps], dict]]] = [
    ("load_request", load_request_node),
    ("validate_request", validate_request_node),
    ("expand_companies", expand_companies_node),
    ("expand_roles", expand_roles_node),
    ("resolve_careers_urls", resolve_careers_urls_node),
    ("load_template", load_template_node),
    ("discover_jobs", discover_jobs_node),
    ("notify", notify_node),
]


def _bind(node: Callable[[PipelineState, PipelineDeps], dict], deps: PipelineDeps):
    def run(state: PipelineState) -> dict:
        return node(state, deps)

    run.__name__ = node.__name__
    return run


def build_pipeline(
    settings: Settings | None = None,
    policy: ScreeningPolicy | None = None,
    client=None,
    browser_factory: Callable[[], Any] | None = None,
):
    """Build and compile the LangGraph pipeline.

    Collaborators default to the real ones built from ``settings``; tests
    pass fakes for the completion client and the browser session.
    """
    settings = settings or Settings.from_env()
    policy = policy or load_policy(settings.policy_path)
    deps = PipelineDeps(
        settings=settings,
        policy=policy,
        client=client or CompletionClient.from_settings(settings),
        browser_factory=browser_factory or (lambda: BrowserSession(settings, policy)),
    )

    graph = StateGraph(PipelineState)
    for name, node in NODES:
        graph.add_node(name, _bind(node, deps))

    graph.set_entry_point(NODES[0][0])
    for (name, _), (next_name, _) in zip(NODES, NODES[1:]):
        graph.add_edge(name, next_name)
    graph.add_edge(NODES[-1][0], END)

    return graph.compile()


def initial_state(
    submission_id: str | None = None,
    criteria_path: str | None = None,
    dry_run: bool = False,
    no_email: bool = False,
) -> PipelineState:
    return {
        "submission_id": submission_id,
        "criteria_path": criteria_path,
        "dry_run": dry_run,
        "no_email": no_email,
        "run_date": datetime.now().strftime("%Y-%m-%d"),
        "errors": [],
    }
