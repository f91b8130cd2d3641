"""
Pipeline Ports - Extension points applied while assembling the pipeline.

GatewayAuthConfig is the gateway's shared security configuration (common to
every authentication mode). PipelineConfigurer is an optional extension
applied after the core wiring.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from gate_ldap.security.pipeline import AuthenticationPipeline


class PipelineConfigurer(ABC):
    """Port: Add stages to an assembled pipeline."""

    @abstractmethod
    def configure(self, pipeline: "AuthenticationPipeline") -> None:
        """
        Extend the pipeline.

        Core stages are locked at this point: configurers may add stages
        but cannot remove or move them.

        Args:
            pipeline: Pipeline with the core stages in place
        """
        pass


class GatewayAuthConfig(ABC):
    """Port: Gateway-wide security rules shared by all authentication modes."""

    @abstractmethod
    def configure(self, pipeline: "AuthenticationPipeline") -> None:
        """
        Apply shared rules (credential extraction, ignored paths, ...).

        Args:
            pipeline: Pipeline under construction
        """
        pass
