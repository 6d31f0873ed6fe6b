# main.py
import argparse
import getpass
import os
import sys

from config import load_config
from logger import log, redirect_log_file
from provisioning.controller import WizardController
from provisioning.errors import ConfigError, SessionError
from provisioning.gateway import SpoolSubmissionGateway
from provisioning.resources import CachedResourceProvider, CatalogResourceProvider
from session import SessionContext


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Create a VM step by step.")
    parser.add_argument("--config", help="Path to config.yaml")
    parser.add_argument("--catalog", help="Resource catalog YAML (overrides config)")
    parser.add_argument("--user", default=os.environ.get("PROVISION_WIZARD_USER", getpass.getuser()))
    parser.add_argument("--project", help="Project ID to act in")
    return parser.parse_args(argv)


def build_app(args):
    from app import ProvisioningWizard

    config = load_config(args.config)
    redirect_log_file(config.log_file)

    session = SessionContext()
    password = os.environ.get("PROVISION_WIZARD_PASSWORD") or getpass.getpass(
        f"Password for {args.user}: "
    )
    session.start(args.user, password)
    if args.project:
        session.switch_project(args.project)

    provider = CachedResourceProvider(
        CatalogResourceProvider(args.catalog or config.catalog_path),
        ttl=config.resource_cache_ttl,
    )
    gateway = SpoolSubmissionGateway(config.spool_dir, session)
    controller = WizardController(
        provider, gateway, max_submit_attempts=config.max_submit_attempts,
    )
    # refetch resources after each created VM
    controller.add_submitted_listener(lambda record: provider.invalidate())
    return ProvisioningWizard(controller, session)


def main(argv=None):
    args = parse_args(argv)
    try:
        app = build_app(args)
    except (ConfigError, SessionError) as e:
        log.error("Startup failed: %s", e)
        print(f"ERROR: {e}", file=sys.stderr)
        sys.exit(1)
    app.run()
    sys.exit(0)


if __name__ == "__main__":
    main()
