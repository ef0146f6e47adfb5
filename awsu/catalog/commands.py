"""The command catalog: one :class:`CommandSpec` per exposed operation.

Argument order inside each ``arguments`` template follows the command
lines the shell functions used to print, so ``--show`` output stays
familiar to people who used them.
"""

from __future__ import annotations

from typing import Dict, List, Tuple

from awsu.catalog.models import CommandSpec, DefaultSource, OutputMode, ParamSpec
from awsu.config.models import DEFAULT_LOG_GROUP
from awsu.options.parser import (
    CLUSTER,
    FILTERS,
    FOLLOW,
    FORCE_NEW_DEPLOYMENT,
    INSTANCE_ID,
    LOG_GROUP,
    NAME,
    REASON,
    REGION,
    SERVICE,
    TASK,
    VPC_ID,
)

# ---------------------------------------------------------------------------
# Shared parameters
# ---------------------------------------------------------------------------

REGION_PARAM = ParamSpec(
    name="region",
    option=REGION,
    required=True,
    default_from=DefaultSource.REGION,
    aws_flag="--region",
    label="Region",
)


def _region(positional: int) -> ParamSpec:
    """Region that may also be given as the positional at *positional*."""
    return REGION_PARAM.model_copy(update={"positional": positional})


def _eks_cluster(aws_flag: str) -> ParamSpec:
    return ParamSpec(
        name="cluster",
        option=CLUSTER,
        positional=0,
        required=True,
        default_from=DefaultSource.CLUSTER,
        aws_flag=aws_flag,
        label="Cluster name",
    )


def _ecs_cluster() -> ParamSpec:
    return ParamSpec(
        name="cluster",
        option=CLUSTER,
        positional=0,
        required=True,
        aws_flag="--cluster",
        label="Cluster name",
    )


def _instance_id(aws_flag: str) -> ParamSpec:
    return ParamSpec(
        name="instance_id",
        option=INSTANCE_ID,
        positional=0,
        required=True,
        aws_flag=aws_flag,
        label="Instance ID",
    )


def _apprunner_service() -> ParamSpec:
    return ParamSpec(
        name="service",
        option=SERVICE,
        positional=0,
        required=True,
        aws_flag="--service-arn",
        label="Service name or ARN",
    )


def _ecs_service(aws_flag: str, *, required: bool = True) -> ParamSpec:
    return ParamSpec(
        name="service",
        option=SERVICE,
        positional=1,
        required=required,
        aws_flag=aws_flag,
        label="Service name",
    )


def _ecs_task(aws_flag: str) -> ParamSpec:
    return ParamSpec(
        name="task",
        option=TASK,
        positional=1,
        required=True,
        aws_flag=aws_flag,
        label="Task ID",
    )


_AUTOMODE_DISABLE_WARNING = (
    "Warning: Disabling auto mode is a destructive operation!",
    "EKS will terminate all EC2 instances managed by auto mode and delete "
    "related load balancers.",
    "EBS volumes provisioned by auto mode will NOT be deleted.",
)

# ---------------------------------------------------------------------------
# EKS
# ---------------------------------------------------------------------------

_EKS: List[CommandSpec] = [
    CommandSpec(
        name="eks-update-config",
        group="EKS",
        service="eks",
        verb="update-kubeconfig",
        summary="Update kubeconfig for EKS cluster",
        params=(REGION_PARAM, _eks_cluster("--name")),
        arguments=("{region}", "{cluster}"),
        announce="Updating kubeconfig for cluster: {cluster} in region: {region}",
        success_message="Kubeconfig updated successfully",
        examples=(
            "eks-update-config",
            "eks-update-config -c my-cluster -r us-east-1",
            "eks-update-config --cluster prod-cluster --region ap-southeast-1",
            "eks-update-config -c my-cluster --show",
        ),
    ),
    CommandSpec(
        name="eks-list-addons",
        group="EKS",
        service="eks",
        verb="list-addons",
        summary="List EKS addons",
        params=(_eks_cluster("--cluster-name"), REGION_PARAM),
        arguments=("{cluster}", "{region}", "--query", "addons[]", "--output", "text"),
        announce="Listing addons for cluster: {cluster} in region: {region}",
    ),
    CommandSpec(
        name="eks-automode-status",
        group="EKS",
        service="eks",
        verb="describe-cluster",
        summary="Check if auto mode is enabled",
        params=(_eks_cluster("--name"), _region(1)),
        arguments=(
            "{cluster}",
            "{region}",
            "--query",
            "cluster.autoModeConfig.enabled",
            "--output",
            "text",
        ),
        announce="Checking auto mode for cluster: {cluster} in region: {region}",
        handler="automode_status",
    ),
    CommandSpec(
        name="eks-automode-enabled",
        group="EKS",
        service="eks",
        verb="update-cluster-config",
        summary="Enable EKS auto mode",
        params=(_eks_cluster("--name"), _region(1)),
        arguments=(
            "{cluster}",
            "{region}",
            "--auto-mode-config",
            "enabled=true",
            "--query",
            "update.id",
            "--output",
            "text",
        ),
        announce="Enabling auto mode for cluster: {cluster} in region: {region}",
        handler="automode_enable",
    ),
    CommandSpec(
        name="eks-automode-disabled",
        group="EKS",
        service="eks",
        verb="update-cluster-config",
        summary="Disable EKS auto mode",
        params=(_eks_cluster("--name"), _region(1)),
        arguments=(
            "{cluster}",
            "{region}",
            "--auto-mode-config",
            "enabled=false",
            "--query",
            "update.id",
            "--output",
            "text",
        ),
        destructive=True,
        warning=_AUTOMODE_DISABLE_WARNING,
        confirm_prompt="Are you sure you want to disable auto mode for cluster '{cluster}'?",
        announce="Disabling auto mode for cluster: {cluster} in region: {region}",
        handler="automode_disable",
    ),
    CommandSpec(
        name="eks-describe",
        group="EKS",
        service="eks",
        verb="describe-cluster",
        summary="Describe EKS cluster",
        params=(_eks_cluster("--name"), _region(1)),
        arguments=("{cluster}", "{region}", "--output", "json"),
        output=OutputMode.JSON,
        announce="Describing cluster: {cluster} in region: {region}",
    ),
    CommandSpec(
        name="eks-list",
        group="EKS",
        service="eks",
        verb="list-clusters",
        summary="List all EKS clusters",
        params=(_region(0),),
        arguments=("{region}", "--query", "clusters[]", "--output", "text"),
        announce="Listing EKS clusters in region: {region}",
    ),
    CommandSpec(
        name="eks-list-nodegroups",
        group="EKS",
        service="eks",
        verb="list-nodegroups",
        summary="List node groups",
        params=(_eks_cluster("--cluster-name"), _region(1)),
        arguments=("{cluster}", "{region}", "--query", "nodegroups[]", "--output", "text"),
        announce="Listing node groups for cluster: {cluster} in region: {region}",
    ),
]

# ---------------------------------------------------------------------------
# ECR
# ---------------------------------------------------------------------------

_ECR: List[CommandSpec] = [
    CommandSpec(
        name="ecr-list",
        group="ECR",
        service="ecr",
        verb="describe-repositories",
        summary="List ECR repositories",
        params=(_region(0),),
        arguments=("{region}", "--query", "repositories[].repositoryUri", "--output", "text"),
        announce="Listing ECR repositories in region: {region}",
    ),
    CommandSpec(
        name="ecr-list-images",
        group="ECR",
        service="ecr",
        verb="list-images",
        summary="List images in repository",
        params=(
            ParamSpec(
                name="repo",
                option=NAME,
                positional=0,
                required=True,
                aws_flag="--repository-name",
                label="Repository name",
            ),
            REGION_PARAM,
        ),
        arguments=("{repo}", "{region}", "--output", "json"),
        output=OutputMode.JSON,
        announce="Listing images in repository: {repo} in region: {region}",
    ),
    CommandSpec(
        name="ecr-login",
        group="ECR",
        service="ecr",
        verb="get-login-password",
        summary="Login to ECR",
        params=(_region(0),),
        arguments=("{region}",),
        announce="Getting ECR login token for region: {region}",
        success_message="ECR login successful",
        handler="ecr_login",
        tools=("aws", "docker"),
    ),
]

# ---------------------------------------------------------------------------
# EC2 / CloudWatch Logs
# ---------------------------------------------------------------------------

_EC2: List[CommandSpec] = [
    CommandSpec(
        name="ec2-userdata",
        group="EC2",
        service="ec2",
        verb="describe-instance-attribute",
        summary="Get EC2 user data",
        params=(_instance_id("--instance-id"), REGION_PARAM),
        arguments=(
            "{instance_id}",
            "--attribute",
            "userData",
            "{region}",
            "--query",
            "UserData.Value",
            "--output",
            "text",
        ),
        announce="Getting user data for instance: {instance_id} in region: {region}",
        formatter="userdata",
    ),
    CommandSpec(
        name="ec2-describe",
        group="EC2",
        service="ec2",
        verb="describe-instances",
        summary="Describe EC2 instance",
        params=(_instance_id("--instance-ids"), REGION_PARAM),
        arguments=("{instance_id}", "{region}", "--output", "json"),
        output=OutputMode.JSON,
        announce="Describing instance: {instance_id} in region: {region}",
    ),
    CommandSpec(
        name="ec2-console-output",
        group="EC2",
        service="ec2",
        verb="get-console-output",
        summary="Get console output (logs)",
        params=(_instance_id("--instance-id"), REGION_PARAM),
        arguments=("{instance_id}", "{region}", "--query", "Output", "--output", "text"),
        announce="Getting console output for instance: {instance_id} in region: {region}",
    ),
    CommandSpec(
        name="ec2-list",
        group="EC2",
        service="ec2",
        verb="describe-instances",
        summary="List EC2 instances",
        params=(
            REGION_PARAM,
            ParamSpec(name="filters", option=FILTERS, aws_flag="--filters"),
        ),
        arguments=("{region}", "{filters}"),
        output=OutputMode.JSON,
        announce="Listing EC2 instances in region: {region}",
        formatter="instances",
        examples=(
            "ec2-list",
            "ec2-list -r us-east-1",
            "ec2-list --filters Name=instance-state-name,Values=running",
            "ec2-list -r us-east-1 --filters Name=tag:Environment,Values=prod",
        ),
    ),
    CommandSpec(
        name="ec2-logs",
        group="EC2",
        service="logs",
        verb="tail",
        summary="Get CloudWatch logs",
        params=(
            ParamSpec(name="log_group", option=LOG_GROUP, default=DEFAULT_LOG_GROUP),
            _instance_id("--filter-pattern"),
            REGION_PARAM,
            ParamSpec(name="follow", option=FOLLOW, aws_flag="--follow"),
        ),
        arguments=("{log_group}", "{instance_id}", "{region}", "{follow}"),
        announce=(
            "Getting logs for instance: {instance_id} from log group: "
            "{log_group} in region: {region}"
        ),
        failure_hint=(
            "Log group not found or no logs available. "
            "Try: ec2-console-output {instance_id}"
        ),
        examples=(
            "ec2-logs -i i-1234567890abcdef0",
            "ec2-logs --instance-id i-1234567890abcdef0 --log-group /aws/ec2/my-app --follow",
            "ec2-logs -i i-1234567890abcdef0 -r us-east-1 -f",
            "ec2-logs -i i-1234567890abcdef0 --show",
        ),
    ),
]

# ---------------------------------------------------------------------------
# VPC
# ---------------------------------------------------------------------------

_VPC: List[CommandSpec] = [
    CommandSpec(
        name="vpc-list",
        group="VPC",
        service="ec2",
        verb="describe-vpcs",
        summary="List VPCs",
        params=(_region(0),),
        arguments=("{region}",),
        output=OutputMode.JSON,
        announce="Listing VPCs in region: {region}",
        formatter="vpcs",
    ),
    CommandSpec(
        name="vpc-list-subnets",
        group="VPC",
        service="ec2",
        verb="describe-subnets",
        summary="List subnets in VPC",
        params=(
            ParamSpec(
                name="vpc_id",
                option=VPC_ID,
                positional=0,
                required=True,
                aws_flag="--filters",
                value_format="Name=vpc-id,Values={}",
                label="VPC ID",
            ),
            _region(1),
        ),
        arguments=("{vpc_id}", "{region}"),
        output=OutputMode.JSON,
        announce="Listing subnets in VPC: {vpc_id} in region: {region}",
        formatter="subnets",
    ),
]

# ---------------------------------------------------------------------------
# RDS
# ---------------------------------------------------------------------------

_RDS: List[CommandSpec] = [
    CommandSpec(
        name="rds-list",
        group="RDS",
        service="rds",
        verb="describe-db-instances",
        summary="List RDS instances",
        params=(_region(0),),
        arguments=("{region}",),
        output=OutputMode.JSON,
        announce="Listing RDS instances in region: {region}",
        formatter="db_instances",
    ),
]

# ---------------------------------------------------------------------------
# ECS
# ---------------------------------------------------------------------------

_ECS: List[CommandSpec] = [
    CommandSpec(
        name="ecs-list-clusters",
        group="ECS",
        service="ecs",
        verb="list-clusters",
        summary="List ECS clusters",
        params=(_region(0),),
        arguments=("{region}", "--query", "clusterArns[]", "--output", "text"),
        announce="Listing ECS clusters in region: {region}",
    ),
    CommandSpec(
        name="ecs-list-services",
        group="ECS",
        service="ecs",
        verb="list-services",
        summary="List services in cluster",
        params=(_ecs_cluster(), _region(1)),
        arguments=("{cluster}", "{region}", "--query", "serviceArns[]", "--output", "text"),
        announce="Listing services in cluster: {cluster} in region: {region}",
    ),
    CommandSpec(
        name="ecs-describe-service",
        group="ECS",
        service="ecs",
        verb="describe-services",
        summary="Describe ECS service",
        params=(_ecs_cluster(), _ecs_service("--services"), _region(2)),
        arguments=("{cluster}", "{service}", "{region}", "--output", "json"),
        output=OutputMode.JSON,
        announce="Describing service: {service} in cluster: {cluster} in region: {region}",
    ),
    CommandSpec(
        name="ecs-list-tasks",
        group="ECS",
        service="ecs",
        verb="list-tasks",
        summary="List tasks in cluster/service",
        params=(
            _ecs_cluster(),
            _ecs_service("--service-name", required=False),
            _region(2),
        ),
        arguments=("{cluster}", "{service}", "{region}", "--query", "taskArns[]", "--output", "text"),
        announce="Listing tasks in cluster: {cluster} in region: {region}",
    ),
    CommandSpec(
        name="ecs-describe-task",
        group="ECS",
        service="ecs",
        verb="describe-tasks",
        summary="Describe ECS task",
        params=(_ecs_cluster(), _ecs_task("--tasks"), _region(2)),
        arguments=("{cluster}", "{task}", "{region}", "--output", "json"),
        output=OutputMode.JSON,
        announce="Describing task: {task} in cluster: {cluster} in region: {region}",
    ),
    CommandSpec(
        name="ecs-update-service",
        group="ECS",
        service="ecs",
        verb="update-service",
        summary="Update service",
        params=(
            _ecs_cluster(),
            _ecs_service("--service"),
            _region(2),
            ParamSpec(
                name="force_new_deployment",
                option=FORCE_NEW_DEPLOYMENT,
                aws_flag="--force-new-deployment",
            ),
        ),
        arguments=("{cluster}", "{service}", "{region}", "{force_new_deployment}", "--output", "json"),
        output=OutputMode.JSON,
        announce="Updating service: {service} in cluster: {cluster} in region: {region}",
        examples=(
            "ecs-update-service my-cluster my-service",
            "ecs-update-service -c my-cluster -s my-service --force-new-deployment",
        ),
    ),
    CommandSpec(
        name="ecs-stop-task",
        group="ECS",
        service="ecs",
        verb="stop-task",
        summary="Stop task",
        params=(
            _ecs_cluster(),
            _ecs_task("--task"),
            _region(2),
            ParamSpec(name="reason", option=REASON, aws_flag="--reason"),
        ),
        arguments=("{cluster}", "{task}", "{region}", "{reason}", "--output", "json"),
        output=OutputMode.JSON,
        announce="Stopping task: {task} in cluster: {cluster} in region: {region}",
        examples=(
            "ecs-stop-task my-cluster 0123456789abcdef",
            "ecs-stop-task -c my-cluster -t 0123456789abcdef --reason 'manual restart'",
        ),
    ),
]

# ---------------------------------------------------------------------------
# App Runner
# ---------------------------------------------------------------------------

_APPRUNNER: List[CommandSpec] = [
    CommandSpec(
        name="apprunner-list-services",
        group="App Runner",
        service="apprunner",
        verb="list-services",
        summary="List App Runner services",
        params=(_region(0),),
        arguments=("{region}", "--query", "ServiceSummaryList[].ServiceArn", "--output", "text"),
        announce="Listing App Runner services in region: {region}",
    ),
    CommandSpec(
        name="apprunner-describe-service",
        group="App Runner",
        service="apprunner",
        verb="describe-service",
        summary="Describe App Runner service",
        params=(_apprunner_service(), _region(1)),
        arguments=("{service}", "{region}", "--output", "json"),
        output=OutputMode.JSON,
        announce="Describing App Runner service: {service} in region: {region}",
    ),
    CommandSpec(
        name="apprunner-list-operations",
        group="App Runner",
        service="apprunner",
        verb="list-operations",
        summary="List operations for service",
        params=(_apprunner_service(), _region(1)),
        arguments=("{service}", "{region}", "--output", "json"),
        output=OutputMode.JSON,
        announce="Listing operations for service: {service} in region: {region}",
    ),
    CommandSpec(
        name="apprunner-pause-service",
        group="App Runner",
        service="apprunner",
        verb="pause-service",
        summary="Pause App Runner service",
        params=(_apprunner_service(), _region(1)),
        arguments=("{service}", "{region}", "--output", "json"),
        output=OutputMode.JSON,
        destructive=True,
        warning=(
            "Warning: This will pause the App Runner service and stop processing requests",
        ),
        confirm_prompt="Are you sure you want to pause service '{service}'?",
        announce="Pausing App Runner service: {service} in region: {region}",
    ),
    CommandSpec(
        name="apprunner-resume-service",
        group="App Runner",
        service="apprunner",
        verb="resume-service",
        summary="Resume App Runner service",
        params=(_apprunner_service(), _region(1)),
        arguments=("{service}", "{region}", "--output", "json"),
        output=OutputMode.JSON,
        announce="Resuming App Runner service: {service} in region: {region}",
    ),
]

# ---------------------------------------------------------------------------
# Other
# ---------------------------------------------------------------------------

_OTHER: List[CommandSpec] = [
    CommandSpec(
        name="aws-whoami",
        group="Other",
        service="sts",
        verb="get-caller-identity",
        summary="Show current AWS identity",
        arguments=("--output", "json"),
        output=OutputMode.JSON,
        announce="Current AWS identity:",
    ),
    CommandSpec(
        name="s3-list",
        group="Other",
        service="s3",
        verb="ls",
        summary="List S3 buckets",
        announce="Listing S3 buckets:",
        failure_hint="Unable to list S3 buckets",
    ),
]

CATALOG: Tuple[CommandSpec, ...] = tuple(
    _EKS + _ECR + _EC2 + _VPC + _RDS + _ECS + _APPRUNNER + _OTHER
)

_BY_NAME: Dict[str, CommandSpec] = {spec.name: spec for spec in CATALOG}


def get_command(name: str) -> CommandSpec:
    """Look up a catalog entry by command name."""
    try:
        return _BY_NAME[name]
    except KeyError:
        raise KeyError(f"Unknown command: {name}") from None


def grouped() -> Dict[str, List[CommandSpec]]:
    """Catalog entries grouped by service heading, in catalog order."""
    groups: Dict[str, List[CommandSpec]] = {}
    for spec in CATALOG:
        groups.setdefault(spec.group, []).append(spec)
    return groups
