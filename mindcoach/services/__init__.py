# noqa
from mindcoach.services.activity_summarizer import ActivitySummarizer, summarize
from mindcoach.services.correlation_service import CorrelationAnalyzer, pearson
from mindcoach.services.event_filter import filter_events
from mindcoach.services.event_recorder import EventRecorder
from mindcoach.services.export_service import EventSerializer, ExportService
from mindcoach.services.focus_analytics import FocusAnalytics
from mindcoach.services.guidance_service import GuidanceBuilder
from mindcoach.services.phase_engine import PhaseEngine
from mindcoach.services.prompt_catalog import PromptCatalog
from mindcoach.services.protocols import FixedClock, SystemClock

__all__ = [
    "ActivitySummarizer",
    "summarize",
    "CorrelationAnalyzer",
    "pearson",
    "filter_events",
    "EventRecorder",
    "EventSerializer",
    "ExportService",
    "FocusAnalytics",
    "GuidanceBuilder",
    "PhaseEngine",
    "PromptCatalog",
    "FixedClock",
    "SystemClock",
]
