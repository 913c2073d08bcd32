from .detect import detect
from .model import Outcome, PlatformTag, RunReport, Stage, ToolResult, ToolSpec
from .pipeline import Bootstrap
from .platforms import ensure_toolchain, install_packages
from .tools import TOOL_SPECS, fetch_tools, publish, verify

__all__ = [
    "detect", "install_packages", "ensure_toolchain", "fetch_tools", "publish", "verify",
    "Bootstrap", "TOOL_SPECS", "Outcome", "PlatformTag", "RunReport", "Stage", "ToolResult", "ToolSpec",
]
