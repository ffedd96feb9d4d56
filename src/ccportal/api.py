"""Portal REST endpoints: builds, deployments, initial passwords, properties.

Each operation formats a subscription-scoped path, calls one of the
authenticated primitives and decodes the JSON answer into a model.
"""

from __future__ import annotations

import io
import sys
import zipfile
from pathlib import Path

from ccportal.client import PortalClient
from ccportal.exceptions import DecodeError
from ccportal.logging import get_logger
from ccportal.models import (
    BuildMeta,
    BuildPage,
    BuildResponse,
    DeploymentPage,
    DeploymentResponse,
    InitialPasswords,
    NewBuild,
    NewDeployment,
    Properties,
)

LOG = get_logger(__name__)

BUILDS = "/v2/subscriptions/{subscription}/builds/"
BUILD_LOGS = BUILDS + "{code}/logs/"
DEPLOYMENTS = "/v2/subscriptions/{subscription}/deployments/"
PASSWORDS = (
    "/v1/subscriptions/{subscription}/environments/{environment}"
    "/serviceconfiguration/hcs_admin/property/initialpassword"
)
PROPERTIES = (
    "/v1/subscriptions/{subscription}/environments/{environment}"
    "/serviceconfiguration/{aspect}/property/customer-properties"
)
CUSTOMER_PROPERTIES_KEY = "customer-properties"


def get_all_builds(client: PortalClient) -> list[BuildMeta]:
    """The 20 most recently started builds."""
    path = (
        BUILDS.format(subscription=client.subscription)
        + "?$top=20&$skip=0&$count=true&$orderby=buildStartTimestamp%20desc"
    )
    page = client.read_json(client.get(client.url(path)), BuildPage)
    return page.value


def get_build(client: PortalClient, code: str) -> BuildMeta:
    path = BUILDS.format(subscription=client.subscription) + code
    return client.read_json(client.get(client.url(path)), BuildMeta)


def create_build(client: PortalClient, name: str, branch: str) -> BuildResponse:
    """Start a build of *branch*; the response carries the new build code."""
    build = NewBuild(subscription_code=client.subscription, name=name, branch=branch)
    url = client.url(BUILDS.format(subscription=client.subscription))
    return client.read_json(client.post_json(url, build), BuildResponse)


def get_build_log(client: PortalClient, code: str) -> str:
    """Return the build log text.

    The endpoint serves a zip archive holding a single log file; the whole
    archive is read into memory and its first member returned.

    Raises:
        DecodeError: If the body is not a zip archive or the archive is empty.
    """
    url = client.url(BUILD_LOGS.format(subscription=client.subscription, code=code))
    response = client.get(url)
    try:
        data = response.content
    finally:
        response.close()
    try:
        with zipfile.ZipFile(io.BytesIO(data)) as archive:
            members = archive.namelist()
            if not members:
                raise DecodeError(f"Build log archive for {code} is empty")
            LOG.debug("build_log_archive", code=code, members=members)
            return archive.read(members[0]).decode("utf-8", errors="replace")
    except zipfile.BadZipFile as exc:
        raise DecodeError(f"Build log for {code} is not a zip archive: {exc}") from exc


def create_deployment(
    client: PortalClient,
    environment: str,
    migration_mode: str,
    deployment_mode: str,
    release: str,
) -> DeploymentResponse:
    """Deploy build *release* to *environment*.

    Args:
        client: Authenticated client.
        environment: Environment code, e.g. ``d1``.
        migration_mode: Database update mode: NONE, UPDATE or INITIALIZE.
        deployment_mode: Strategy: ROLLING_UPDATE or RECREATE.
        release: Build code to deploy.
    """
    deployment = NewDeployment(
        environment_code=environment,
        database_update_mode=migration_mode,
        strategy=deployment_mode,
        build_code=release,
    )
    url = client.url(DEPLOYMENTS.format(subscription=client.subscription))
    return client.read_json(client.post_json(url, deployment), DeploymentResponse)


def _deployments(client: PortalClient, environment: str, top: int) -> DeploymentPage:
    path = DEPLOYMENTS.format(subscription=client.subscription) + (
        f"?environmentCode={environment}&$top={top}&$skip=0&$count=true"
        "&$orderby=scheduledTimestamp%20desc"
    )
    return client.read_json(client.get(client.url(path)), DeploymentPage)


def get_running_deployments(client: PortalClient, environment: str) -> DeploymentPage:
    """The most recently scheduled deployment of *environment*."""
    return _deployments(client, environment, 1)


def get_deployments(client: PortalClient, environment: str) -> DeploymentPage:
    """The 12 most recently scheduled deployments of *environment*."""
    return _deployments(client, environment, 12)


def get_initial_passwords(client: PortalClient, environment: str) -> InitialPasswords:
    url = client.url(PASSWORDS.format(subscription=client.subscription, environment=environment))
    return client.read_json(client.get(url), InitialPasswords)


def get_customer_properties(client: PortalClient, environment: str, aspect: str) -> Properties:
    url = client.url(
        PROPERTIES.format(subscription=client.subscription, environment=environment, aspect=aspect)
    )
    return client.read_json(client.get(url), Properties)


def set_customer_properties(
    client: PortalClient, environment: str, aspect: str, filename: str
) -> Properties:
    """Replace the customer properties of *aspect* with the content of a file.

    Args:
        client: Authenticated client.
        environment: Environment code.
        aspect: Service aspect, e.g. ``hcs_common`` or ``backoffice``.
        filename: Properties file, or ``-`` to read standard input.
    """
    if filename == "-":
        value = sys.stdin.read()
    else:
        value = Path(filename).read_text()
    url = client.url(
        PROPERTIES.format(subscription=client.subscription, environment=environment, aspect=aspect)
    )
    properties = Properties(key=CUSTOMER_PROPERTIES_KEY, value=value)
    return client.read_json(client.put_json(url, properties), Properties)
