"""
Tests for submodule listing and updating.
"""

import pytest

from gbulk.services.submodule_service import PULL_ARGS, SubmoduleListing, SubmoduleService

CHECKOUT_MAIN = ["submodule", "foreach", "git", "checkout", "main"]
PULL = ["submodule", "foreach", "git", *PULL_ARGS]


@pytest.fixture
def service(config, fake_git):
    fake_git.submodule_paths.update({"/repos/app", "/repos/site"})
    return SubmoduleService(config=config, git_client=fake_git)


class TestListSubmodules:

    def test_only_repositories_with_submodules(self, service, fake_git):
        fake_git.script(["submodule"], cwd="/repos/app",
                        stdout=" 1a2b3c4 vendor/lib (heads/main)\n\n-5d6e7f8 docs\n")

        listings = service.list_submodules(["/repos/app", "/repos/plain", "/repos/site"])

        assert [listing.name for listing in listings] == ["app", "site"]
        assert listings[0].entries == ["1a2b3c4 vendor/lib (heads/main)", "-5d6e7f8 docs"]
        assert listings[1].entries == []

    def test_listing_failure_recorded(self, service, fake_git):
        fake_git.script(["submodule"], cwd="/repos/app", stderr="fatal: broken\n", exit_code=128)

        listing = service.list_submodules(["/repos/app"])[0]

        assert listing.error == "fatal: broken"
        assert listing.to_dict() == {
            "path": "/repos/app",
            "name": "app",
            "submodules": [],
            "error": "fatal: broken",
        }

    def test_to_dict_without_error(self):
        listing = SubmoduleListing(path="/repos/app", entries=["abc vendor"])

        assert "error" not in listing.to_dict()


class TestUpdateRepos:

    def test_checkout_then_pull(self, service, fake_git):
        summary = service.update_repos(["/repos/app"])

        assert fake_git.commands("/repos/app") == [CHECKOUT_MAIN, PULL]
        assert summary.outcomes[0].message == "Submodules updated successfully"
        assert summary.operation == "submodule_update"

    def test_skips_repositories_without_submodules(self, service, fake_git):
        summary = service.update_repos(["/repos/plain", "/repos/site"])

        assert [o.path for o in summary.outcomes] == ["/repos/site"]
        assert fake_git.commands("/repos/plain") == []

    def test_explicit_branch(self, service, fake_git):
        service.update_repos(["/repos/app"], branch="develop")

        assert fake_git.commands("/repos/app")[0] == ["submodule", "foreach", "git", "checkout", "develop"]

    def test_configured_default_branch(self, config, fake_git):
        config["submodules"]["default_branch"] = "trunk"
        fake_git.submodule_paths.add("/repos/app")

        SubmoduleService(config=config, git_client=fake_git).update_repos(["/repos/app"])

        assert fake_git.commands("/repos/app")[0][-1] == "trunk"

    def test_checkout_failure_stops_before_pull(self, service, fake_git):
        fake_git.script(CHECKOUT_MAIN, exit_code=1)

        outcome = service.update_repos(["/repos/app"]).outcomes[0]

        assert not outcome.success
        assert outcome.message == "Failed to checkout main in submodules"
        assert PULL not in fake_git.commands("/repos/app")

    def test_pull_failure_uses_stderr(self, service, fake_git):
        fake_git.script(PULL, stderr="error: cannot pull with rebase\n", exit_code=1)

        outcome = service.update_repos(["/repos/app"]).outcomes[0]

        assert outcome.message == "error: cannot pull with rebase"

    def test_pull_failure_generic_message(self, service, fake_git):
        fake_git.script(PULL, exit_code=1)

        assert service.update_repos(["/repos/app"]).outcomes[0].message == "Failed to pull submodules"
