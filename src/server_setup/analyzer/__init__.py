"""Analyzer package - Judges scanned host state."""

from server_setup.analyzer.provisioning_auditor import ProvisioningAuditor

__all__ = ["ProvisioningAuditor"]
