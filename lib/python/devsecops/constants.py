"""Shared constants for devsecops-setup."""

from __future__ import annotations

# ANSI colors
RED = "\033[0;31m"
GREEN = "\033[0;32m"
YELLOW = "\033[1;33m"
BLUE = "\033[0;34m"
BOLD = "\033[1m"
NC = "\033[0m"

# Template source
DEFAULT_REPO_URL = "https://github.com/awslabs/devsecops-pre-commit-and-cicd-template.git"
REPO_URL_ENV = "DEVSECOPS_REPO_URL"
STAGING_NAME = "DevSecOps"

# Paths inside the template repository (and their project destinations)
CONFIG_DIR = ".devsecops"
LICENSE_POLICY = "licensecheck.toml"
HOOK_CONFIG = ".pre-commit-config.yaml"
GITHUB_WORKFLOW = ".github/workflows/security-compliance.yml"
GITLAB_CI = ".gitlab-ci.yml"
AZURE_PIPELINES = "azure-pipelines.yml"

BACKUP_SUFFIX = ".bak"

# Launcher removed after a transient run
LAUNCHER_NAME = "setup_devsecops.py"

GITIGNORE = ".gitignore"
IGNORE_SENTINEL = "# DevSecOps - Generated files"
IGNORE_BLOCK = """
# DevSecOps - Generated files (safe to ignore)
ferret-sast-report.json
.ash/
.eslintcache

# DevSecOps - Tool cache directories
.ruff_cache/
.mypy_cache/
.pytest_cache/
"""

PROJECT_TYPES_FILENAME = "project_types.yaml"
