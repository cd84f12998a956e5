# (c) Copyright Datacraft, 2026
from prometheus_client import Counter

PROJECT_WRITE_CONFLICTS = Counter(
	"onboard_project_write_conflicts_total",
	"Project writes that lost against a concurrent writer",
)
PROGRESS_RECOMPUTES = Counter(
	"onboard_progress_recomputes_total",
	"Progress recomputations of project aggregates",
)
DOCUMENT_UPLOADS = Counter(
	"onboard_document_uploads_total",
	"Document uploads by outcome",
	["outcome"],
)
