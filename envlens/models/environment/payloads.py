"""Environment API payload models.

Every model narrows one loosely-shaped control-plane payload to a single
canonical shape. Field-name variants are collapsed with ``AliasChoices`` so
derivation code never has to know about alternate spellings.

Records are validated field by field: a malformed value falls back to that
field's default instead of discarding the whole record.
"""

import logging
from typing import Any

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)
from pydantic.functional_validators import ModelWrapValidatorHandler

logger = logging.getLogger(__name__)


class _Payload(BaseModel):
    """Base for API payloads: tolerant of unknown fields, populated by alias."""

    model_config = ConfigDict(
        populate_by_name=True, extra="ignore", coerce_numbers_to_str=True
    )

    @classmethod
    def _input_keys(cls, loc: str) -> set[str]:
        """Return every input key that feeds the field reported at ``loc``."""
        for name, info in cls.model_fields.items():
            keys = {name}
            if info.alias:
                keys.add(info.alias)
            if isinstance(info.validation_alias, str):
                keys.add(info.validation_alias)
            elif isinstance(info.validation_alias, AliasChoices):
                keys.update(c for c in info.validation_alias.choices if isinstance(c, str))
            if loc in keys:
                return keys
        return {loc}

    @model_validator(mode="wrap")
    @classmethod
    def _validate_leniently(
        cls, data: Any, handler: ModelWrapValidatorHandler["_Payload"]
    ) -> "_Payload":
        if not isinstance(data, dict):
            return handler(data)
        # The API sends explicit nulls for unset fields; treat them as missing.
        data = {key: value for key, value in data.items() if value is not None}
        while True:
            try:
                return handler(data)
            except ValidationError as exc:
                invalid: set[str] = set()
                for error in exc.errors():
                    if error["loc"] and isinstance(error["loc"][0], str):
                        invalid |= cls._input_keys(error["loc"][0])
                kept = {key: value for key, value in data.items() if key not in invalid}
                if len(kept) == len(data):
                    raise
                logger.debug(
                    "Dropping invalid %s fields: %s",
                    cls.__name__,
                    sorted(set(data) - set(kept)),
                )
                data = kept


class StackInfo(_Payload):
    """Project (stack) metadata embedded in the cluster object."""

    name: str | None = None
    branch: str | None = None
    project_type_id: str | None = Field(default=None, alias="projectTypeId")
    vcs_url: str | None = Field(default=None, alias="vcsUrl")
    primary_cloud: str | None = Field(default=None, alias="primaryCloud")
    allowed_clouds: list[str] = Field(default_factory=list, alias="allowedClouds")


class VariableMeta(_Payload):
    """Metadata for one environment variable."""

    secret: bool = False
    status: str | None = None
    description: str | None = None


class ClusterInfo(_Payload):
    """The environment (cluster) object carried by the overview snapshot."""

    id: str | None = None
    name: str | None = None
    stack_name: str | None = Field(default=None, alias="stackName")
    cluster_state: str | None = Field(default=None, alias="clusterState")
    cloud: str | None = None
    cloud_account_id: str | None = Field(default=None, alias="cloudAccountId")
    namespace: str | None = None
    is_ephemeral: bool = Field(default=False, alias="isEphemeral")
    base_cluster_id: str | None = Field(default=None, alias="baseClusterId")
    base_cluster_name: str | None = Field(default=None, alias="baseClusterName")
    pause_releases: bool = Field(default=False, alias="pauseReleases")
    require_sign_off: bool = Field(default=False, alias="requireSignOff")
    enable_auto_sign_off: bool = Field(default=False, alias="enableAutoSignOff")
    auto_sign_off_schedule: str | None = Field(default=None, alias="autoSignOffSchedule")
    release_stream: str | None = Field(default=None, alias="releaseStream")
    branch: str | None = None
    tz: str | None = None
    created_by: str | None = Field(default=None, alias="createdBy")
    creation_date: str | None = Field(default=None, alias="creationDate")
    last_modified_by: str | None = Field(default=None, alias="lastModifiedBy")
    last_modified_date: str | None = Field(default=None, alias="lastModifiedDate")
    cd_pipeline_parent: str | None = Field(default=None, alias="cdPipelineParent")
    configured: bool = False
    has_k8s_credentials: bool = Field(default=False, alias="hasK8sCredentials")
    k8s_requests_to_limits_ratio: float | None = Field(
        default=None, alias="k8sRequestsToLimitsRatio"
    )
    component_versions: dict[str, Any] = Field(
        default_factory=dict, alias="componentVersions"
    )
    stack: StackInfo | None = None
    variables: dict[str, VariableMeta] = Field(default_factory=dict)
    common_environment_variables: dict[str, Any] = Field(
        default_factory=dict, alias="commonEnvironmentVariables"
    )


class DeploymentStats(_Payload):
    """Per-release-type counters for an environment."""

    success_releases: int = Field(default=0, alias="successReleases")
    failed_releases: int = Field(default=0, alias="failedReleases")
    no_change_releases: int = Field(default=0, alias="noChangeReleases")
    is_first_release: bool = Field(default=False, alias="isFirstRelease")

    @property
    def total(self) -> int:
        return self.success_releases + self.failed_releases + self.no_change_releases


class Deployment(_Payload):
    """One release (deployment) record."""

    id: str | None = None
    release_type: str | None = Field(default=None, alias="releaseType")
    status: str | None = None
    triggered_by: str | None = Field(default=None, alias="triggeredBy")
    created_on: str | None = Field(default=None, alias="createdOn")
    finished_on: str | None = Field(default=None, alias="finishedOn")
    release_trace_id: str | None = Field(default=None, alias="releaseTraceId")
    time_taken_in_seconds: float | None = Field(default=None, alias="timeTakenInSeconds")
    changes_applied: list[Any] = Field(default_factory=list, alias="changesApplied")


class Overview(_Payload):
    """Live snapshot of an environment."""

    cluster: ClusterInfo | None = None
    in_progress_deployments: list[Deployment] = Field(
        default_factory=list, alias="inProgressDeployments"
    )
    queued_releases: list[Any] = Field(default_factory=list, alias="queuedReleases")
    latest_deployment: Deployment | None = Field(default=None, alias="latestDeployment")
    deployments_stats: DeploymentStats | None = Field(
        default=None, alias="deploymentsStats"
    )
    down_stream_cluster_names: list[str] = Field(
        default_factory=list, alias="downStreamClusterNames"
    )
    is_scheduled_releases_paused: bool = Field(
        default=False, alias="isScheduledReleasesPaused"
    )

    @field_validator("in_progress_deployments", mode="before")
    @classmethod
    def _keep_deployment_records(cls, value: Any) -> Any:
        if isinstance(value, list):
            return [item for item in value if isinstance(item, (dict, Deployment))]
        return value

    @field_validator("down_stream_cluster_names", mode="before")
    @classmethod
    def _keep_names(cls, value: Any) -> Any:
        if isinstance(value, list):
            return [item for item in value if isinstance(item, str) and item]
        return value


class ResourceStats(_Payload):
    """Aggregate resource counters."""

    total_count: int = Field(
        default=0, validation_alias=AliasChoices("totalCount", "total", "total_count")
    )
    enabled_count: int | None = Field(
        default=None,
        validation_alias=AliasChoices("enabledCount", "activeCount", "enabled_count"),
    )

    @model_validator(mode="after")
    def _default_enabled_to_total(self) -> "ResourceStats":
        if self.enabled_count is None:
            self.enabled_count = self.total_count
        return self


class VariableCounts(_Payload):
    """Variable and secret counters."""

    variable_count: int = Field(
        default=0,
        validation_alias=AliasChoices("variableCount", "variables", "variable_count"),
    )
    secret_count: int = Field(
        default=0,
        validation_alias=AliasChoices("secretCount", "secrets", "secret_count"),
    )

    @property
    def total(self) -> int:
        return self.variable_count + self.secret_count


class ResourceItem(_Payload):
    """One resource in the resources list."""

    name: str = Field(
        default="—", validation_alias=AliasChoices("resourceName", "name")
    )
    resource_type: str = Field(
        default="unknown", validation_alias=AliasChoices("resourceType", "type")
    )
    enabled: bool = True
    has_override: bool = False

    @model_validator(mode="before")
    @classmethod
    def _normalize_flags(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        disabled = data.get("disabled")
        enabled = data.get("enabled")
        is_enabled = (
            disabled is False
            or enabled is True
            or (not disabled and enabled is not False)
        )
        has_override = bool(
            data.get("override") or data.get("overrideExists") or data.get("hasOverride")
        )
        return {**data, "enabled": is_enabled, "has_override": has_override}


class IngressRule(_Payload):
    """One exposed ingress endpoint."""

    host: str | None = Field(default=None, validation_alias=AliasChoices("host", "hostname"))
    path: str = Field(default="/", validation_alias=AliasChoices("path", "pathPrefix"))
    service_name: str | None = Field(
        default=None, validation_alias=AliasChoices("serviceName", "service")
    )
    port: str | None = Field(default=None, validation_alias=AliasChoices("port", "servicePort"))

    @property
    def url(self) -> str | None:
        if not self.host:
            return None
        return f"https://{self.host}{self.path}"


class AvailabilitySchedule(_Payload):
    """Automatic start/stop schedule."""

    name: str | None = Field(default=None, validation_alias=AliasChoices("name", "scheduleName"))
    start_cron: str | None = Field(
        default=None, validation_alias=AliasChoices("startCron", "startExpression")
    )
    stop_cron: str | None = Field(
        default=None, validation_alias=AliasChoices("stopCron", "stopExpression")
    )
    timezone: str | None = Field(default=None, validation_alias=AliasChoices("timezone", "tz"))
    enabled: bool = True


class MaintenanceWindow(_Payload):
    """Maintenance window configuration."""

    enabled: bool = False
    start: str | None = Field(default=None, validation_alias=AliasChoices("startCron", "startTime"))
    end: str | None = Field(default=None, validation_alias=AliasChoices("endCron", "endTime"))


class ProjectSummary(_Payload):
    """Project entry for the environment picker."""

    name: str = Field(validation_alias=AliasChoices("name", "stackName"))


class EnvironmentSummary(_Payload):
    """Environment entry for the environment picker."""

    id: str = Field(validation_alias=AliasChoices("id", "clusterId"))
    name: str | None = None
    state: str | None = Field(default=None, validation_alias=AliasChoices("clusterState", "state"))

    @property
    def label(self) -> str:
        base = self.name or self.id
        return f"{base} ({self.state})" if self.state else base
