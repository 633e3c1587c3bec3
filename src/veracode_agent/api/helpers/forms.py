"""
Request forms for the Veracode XML API.

Each XML endpoint gets one dataclass listing the fields it accepts. Field
names are the Python-side option names; ``wire`` metadata gives the form
field name when the two differ. ``to_form()`` drops unset fields and
renders booleans the way the API expects them (``true``/``false``).
"""

from dataclasses import dataclass, field, fields
from typing import Any, Dict, Optional


def _wire(name: str) -> Any:
    return field(default=None, metadata={"wire": name})


class XmlForm:
    """Mixin turning a dataclass into a form-field mapping."""

    def to_form(self) -> Dict[str, str]:
        form = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            if isinstance(value, bool):
                value = "true" if value else "false"
            form[f.metadata.get("wire", f.name)] = str(value)
        return form


@dataclass
class SandboxListForm(XmlForm):
    app_id: str


@dataclass
class CreateSandboxForm(XmlForm):
    app_id: str
    sandbox_name: str


@dataclass
class BuildListForm(XmlForm):
    app_id: str
    sandbox_id: Optional[str] = None


@dataclass
class AppBuildsForm(XmlForm):
    report_changed_since: Optional[str] = None
    only_latest: Optional[bool] = None
    include_in_progress: Optional[bool] = None


@dataclass
class BuildReportForm(XmlForm):
    build_id: str


@dataclass
class UploadFileForm(XmlForm):
    app_id: str
    sandbox_id: Optional[str] = None
    save_as: Optional[str] = None


@dataclass
class BeginPrescanForm(XmlForm):
    app_id: str
    auto_scan: Optional[bool] = None
    sandbox_id: Optional[str] = None
    scan_all_nonfatal_top_level_modules: Optional[bool] = None


@dataclass
class CreateAppForm(XmlForm):
    app_name: str
    business_criticality: str
    description: Optional[str] = None
    vendor_id: Optional[str] = None
    policy: Optional[str] = None
    business_unit: Optional[str] = None
    business_owner: Optional[str] = None
    business_owner_email: Optional[str] = None
    teams: Optional[str] = None
    origin: Optional[str] = None
    industry: Optional[str] = None
    app_type: Optional[str] = None
    deployment_method: Optional[str] = None
    web_application: Optional[bool] = None
    archer_app_name: Optional[str] = None
    tags: Optional[str] = None


@dataclass
class CreateBuildForm(XmlForm):
    app_id: str
    app_version: Optional[str] = _wire("version")
    lifecycle_stage: Optional[str] = None
    launch_date: Optional[str] = None
    sandbox_id: Optional[str] = None
    legacy_scan_engine: Optional[bool] = None


@dataclass
class BuildInfoForm(XmlForm):
    app_id: str
    build_id: Optional[str] = None
    sandbox_id: Optional[str] = None


@dataclass
class DeleteAppForm(XmlForm):
    app_id: str
