"""
Authentication Pipeline Assembler - Wires LDAP login into the gateway pipeline.

Core wiring order:
1. form login (POST /login)
2. the gateway's shared auth config
3. the transport-aware entry point for every unauthenticated access
4. the login page, before the first credential-extraction stage,
   posting to /login
Extra configurers run afterwards, in the order given, against a pipeline
whose core stages are locked.
"""

import logging
from typing import Any, Mapping, Optional, Sequence

from gate_ldap.adapters.ldap_directory import Ldap3DirectoryClient
from gate_ldap.domain.config import DirectoryBindConfig, GatewaySettings
from gate_ldap.errors import ConfigurationError
from gate_ldap.ports.credential_port import CredentialPort
from gate_ldap.ports.directory_port import DirectoryClientPort
from gate_ldap.ports.pipeline_port import GatewayAuthConfig, PipelineConfigurer
from gate_ldap.security.authenticator import AuthenticationOutcome, DirectoryAuthenticator
from gate_ldap.security.entry_point import LOGIN_PATH, TransportAwareEntryPoint
from gate_ldap.security.identity_mapper import IdentityMapper
from gate_ldap.security.login_page import LoginPageStage
from gate_ldap.security.pipeline import AuthenticationPipeline, first_present
from gate_ldap.security.stages import CREDENTIAL_STAGES, FormLoginStage


logger = logging.getLogger(__name__)


class AuthenticationPipelineAssembler:
    """
    Compose directory config, identity mapping and the entry point.

    Example:
        assembler = AuthenticationPipelineAssembler(
            bind_config=DirectoryBindConfig.from_env(),
            settings=GatewaySettings.from_env(),
            mapper=IdentityMapper(registrar, resolver),
            auth_config=DefaultGatewayAuthConfig(),
        )
        pipeline = assembler.assemble()
        response = pipeline.handle(request, endpoint)
    """

    def __init__(
        self,
        bind_config: DirectoryBindConfig,
        settings: GatewaySettings,
        mapper: IdentityMapper,
        auth_config: Optional[GatewayAuthConfig] = None,
        configurers: Optional[Sequence[PipelineConfigurer]] = None,
        directory: Optional[DirectoryClientPort] = None,
    ):
        """
        Initialize the assembler. Configuration is validated here, at startup.

        Args:
            bind_config: Directory connection settings
            settings: Gateway settings (advertised base URL)
            mapper: Identity mapper with its collaborators
            auth_config: Gateway-wide shared security rules
            configurers: Extra pipeline configurers, applied last in order
            directory: Directory client (default: ldap3 client from bind_config)

        Raises:
            ConfigurationError: If mandatory directory settings are missing
        """
        self._config = bind_config.validate()
        self._settings = settings
        self._mapper = mapper
        self._auth_config = auth_config
        self._configurers = list(configurers or [])
        self._directory = directory or self.build_directory_client()
        self._entry_point = TransportAwareEntryPoint(settings.base_url)
        self._authenticator = DirectoryAuthenticator(self._directory, mapper)

    @classmethod
    def from_settings(
        cls,
        props: Mapping[str, Any],
        mapper: IdentityMapper,
        auth_config: Optional[GatewayAuthConfig] = None,
        configurers: Optional[Sequence[PipelineConfigurer]] = None,
        credentials: Optional[CredentialPort] = None,
        directory: Optional[DirectoryClientPort] = None,
    ) -> Optional["AuthenticationPipelineAssembler"]:
        """
        Build from flat properties, honoring the ldap.enabled flag.

        Returns:
            Assembler, or None when LDAP authentication is disabled

        Raises:
            ConfigurationError: If enabled but misconfigured
        """
        settings = GatewaySettings.from_mapping(props)
        if not settings.enabled:
            logger.info("LDAP authentication disabled (ldap.enabled is false)")
            return None

        bind_config = DirectoryBindConfig.from_mapping(props)
        if credentials is not None:
            bind_config = bind_config.resolve_manager_password(credentials)

        return cls(
            bind_config=bind_config,
            settings=settings,
            mapper=mapper,
            auth_config=auth_config,
            configurers=configurers,
            directory=directory,
        )

    @property
    def bind_config(self) -> DirectoryBindConfig:
        return self._config

    @property
    def entry_point(self) -> TransportAwareEntryPoint:
        return self._entry_point

    @property
    def authenticator(self) -> DirectoryAuthenticator:
        return self._authenticator

    def build_directory_client(self) -> DirectoryClientPort:
        """ldap3 client with DN pattern first, then search base/filter."""
        client = Ldap3DirectoryClient(self._config)
        logger.info(
            "LDAP directory %s with resolution paths %s",
            self._config.url, client.resolution_paths(),
        )
        return client

    def authenticate(self, username: str, password: str) -> AuthenticationOutcome:
        """Run a single authentication attempt."""
        return self._authenticator.authenticate(username, password)

    def assemble(self) -> AuthenticationPipeline:
        """
        Build the pipeline.

        Returns:
            Pipeline with core stages locked and configurers applied
        """
        pipeline = AuthenticationPipeline()

        pipeline.add_stage(FormLoginStage(self._authenticator, self._entry_point, login_url=LOGIN_PATH))

        if self._auth_config is not None:
            self._auth_config.configure(pipeline)

        pipeline.set_entry_point(self._entry_point)

        login_page = LoginPageStage(login_page_url=LOGIN_PATH)
        login_page.set_authentication_url(LOGIN_PATH)
        anchor = first_present(pipeline, CREDENTIAL_STAGES)
        if anchor is None:
            raise ConfigurationError("Pipeline has no credential-extraction stage for the login page")
        pipeline.add_before(login_page, anchor)

        pipeline.lock_core()

        for configurer in self._configurers:
            configurer.configure(pipeline)

        logger.info(
            "Assembled LDAP authentication pipeline %s (force https: %s)",
            list(pipeline.stage_names), self._entry_point.policy.force_secure_redirect,
        )
        return pipeline
