#!/usr/bin/env python3
"""
Translation Sync Demo

Shows the state of a working branch: changed translation files, line
diffs, conflicts with the stable branch and the configured reviewers.
Nothing is written to the repository except the draft pull request that
GitHub needs for review comments.

Usage:
    GITHUB_TOKEN=... GITHUB_OWNER=... python examples/sync_demo.py <repo> <branch>

Example:
    GITHUB_OWNER=acme python examples/sync_demo.py glossary translations/fr-weather
"""

import os
import sys
import logging

from translation_gateway import TranslationGatewayAPI
from translation_gateway.config import AppConfig
from translation_gateway.errors import GatewayError
from translation_gateway.github.client import GitHubAPIError, GitHubTimeoutError


def setup_logging():
    """Set up logging configuration."""
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def main():
    """Main demo function."""
    setup_logging()
    logger = logging.getLogger(__name__)

    if len(sys.argv) != 3:
        print("Usage: python sync_demo.py <repo> <branch>")
        sys.exit(1)

    repo, branch = sys.argv[1], sys.argv[2]

    token = os.getenv('GITHUB_TOKEN')
    if not token:
        print("Error: GITHUB_TOKEN environment variable is not set")
        sys.exit(1)

    config = AppConfig.from_env()
    try:
        config.validate()
    except GatewayError as e:
        print(f"Error: {e.message}")
        sys.exit(1)

    try:
        gateway = TranslationGatewayAPI(config)
        gateway.check_branch(branch)
        session = gateway.session(token)

        logger.info(f"Loading changes for {config.repository.owner}/{repo}@{branch}...")
        result = session.get_changed_files(repo, branch)

        if result.no_changes:
            print(f"\n{result.message}")
            return

        print(f"\n📋 Pull Request #{result.pull_request_number}")
        print(f"\n📁 Files Changed: {len(result.files)}")
        for changed in result.files:
            added = sum(segment.count for segment in changed.diff if segment.added)
            removed = sum(segment.count for segment in changed.diff if segment.removed)
            print(f"   - {changed.filename} (+{added}/-{removed})")

        print(f"\n💬 Review Comments: {len(result.comments)}")

        conflicts = session.get_conflicts(repo, branch)
        print(f"\n⚠️  Files With Conflicts: {len(conflicts)}")
        for file_conflicts in conflicts:
            if file_conflicts.error:
                print(f"   - {file_conflicts.filename}: {file_conflicts.error}")
                continue
            for conflict in file_conflicts.conflicts:
                print(f"   - {conflict.filename} [{conflict.label}/{conflict.language}] "
                      f"{conflict.reference_value!r} -> {conflict.branch_value!r}")

        try:
            reviewers = session.get_reviewers(repo)
            print(f"\n👥 Reviewers: {', '.join(reviewers)}")
        except GatewayError as e:
            print(f"\n👥 Reviewers: {e.message}")

        print("\n✅ Demo completed successfully!")

    except GatewayError as e:
        logger.error(f"Gateway error: {e.message}")
        sys.exit(1)
    except (GitHubAPIError, GitHubTimeoutError) as e:
        logger.error(f"GitHub API error: {e}")
        sys.exit(1)


if __name__ == '__main__':
    main()
