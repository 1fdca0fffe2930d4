#!/usr/bin/env python3

"""
Check Target Branches Script
----------------------------
This script determines which branches a pull request will be merged into, based on
the target label applied to the pull request and the branch targeted in the GitHub UI.

The `merge.targetLabels` section of the config file maps each target label to a branch
rule. Exactly one configured target label must be applied to the pull request; a missing
or ambiguous target label is reported as an error and the script exits with status 1.
When `merge.noTargetLabeling` is set, every pull request merges into the main branch and
GitHub is not queried.

Arguments:
    --pr        : Pull request number
    --config    : OPTIONAL, path to the merge-config.json file
    --client    : OPTIONAL, `api` (REST API, default) or `cli` (GitHub CLI)
    --debug     : If set, enables detailed debug logging.

Outputs:
    Prints the target branches to stdout, one per line, under a header naming the PR.

Example Usage:
    To run in debug mode using the GitHub CLI:
        python check_target_branches.py --pr 123 --client cli --debug
"""

import argparse
import sys
import logging
from typing import Callable, List, Optional
from rich.console import Console
from config_loader import load_targeting_config
from github_api_client import GitHubAPIClient
from github_cli_client import GitHubCLIClient
from pull_request import PullRequestClient
from target_config_model import TargetingConfig
from target_label import InvalidTargetLabelError, get_branches_from_target_label, resolve_target_label

logger = logging.getLogger(__name__)

CLIENTS = {
    "api": GitHubAPIClient,
    "cli": GitHubCLIClient,
}

def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(description="Print the branches a PR will merge into.")
    parser.add_argument("--pr", required=True, type=int, help="Pull request number")
    parser.add_argument("--config", required=False, default=".github/merge-config.json", help="Path to the merge-config.json file")
    parser.add_argument("--client", required=False, default="api", choices=sorted(CLIENTS), help="How to query GitHub for the PR.")
    parser.add_argument("--debug", action="store_true", help="If set, enables detailed debug logging.")
    return parser.parse_args(argv)

def get_target_branches_for_pr(pr_number: int, config: TargetingConfig, client: PullRequestClient) -> List[str]:
    """Fetch the PR and expand its target label into the branches it will merge into."""
    pr = client.get_pull_request(config.github.owner, config.github.name, pr_number)
    target_label = resolve_target_label(config.merge, pr.labels)
    return get_branches_from_target_label(
        target_label,
        pr.base_ref,
        main_branch_name=config.github.main_branch_name,
        release_branches=config.merge.release_branches,
    )

def print_target_branches_for_pr(pr_number: int, config: TargetingConfig,
                                 client_factory: Callable[[], PullRequestClient]) -> None:
    """Print the branches the PR will merge into, exiting with status 1 on an invalid target label."""
    if config.merge.no_target_labeling:
        print(f"PR #{pr_number} will merge into: {config.github.main_branch_name}")
        return
    try:
        targets = get_target_branches_for_pr(pr_number, config, client_factory())
    except InvalidTargetLabelError as e:
        logger.debug(f"Invalid target label on PR #{pr_number}: {e.kind.value}")
        Console(stderr=True).print(e.failure_message, style="red", markup=False, highlight=False, soft_wrap=True)
        sys.exit(1)
    print(f"PR #{pr_number} will merge into:")
    for target in targets:
        print(f"  - {target}")

def main(argv: Optional[List[str]] = None) -> None:
    """Main function to execute the target branch check."""
    args = parse_arguments(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO
    )
    config = load_targeting_config(args.config)
    print_target_branches_for_pr(args.pr, config, CLIENTS[args.client])

if __name__ == "__main__":
    main()
