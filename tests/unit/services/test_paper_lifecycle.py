"""Unit tests for PaperLifecycle."""

from datetime import datetime

import pytest

from models import ANONYMOUS, FailureKind, ReviewStatus


class TestSubmission:
    """Test paper submission."""

    def test_submit_creates_pending_paper(self, system, people, paper_id):
        paper = system.papers.find_paper_by_id(paper_id)
        assert paper.status == ReviewStatus.PENDING
        assert paper.author_id == people["student"].user_id
        assert paper.author_name == "Sam Student"
        assert paper.keywords == ("Graphs", "Algorithms")
        assert paper.reviewer_ids == ()

    def test_submission_date_from_clock(self, system, paper_id):
        # The fixture clock starts at 2024-01-15 12:00
        paper = system.papers.find_paper_by_id(paper_id)
        assert paper.submission_date == datetime(2024, 1, 15, 12, 0, 0)

    def test_unknown_author_fails(self, system):
        outcome = system.papers.submit_paper("T", "A", "C", "ghost", [])
        assert outcome.kind == FailureKind.NOT_FOUND
        assert system.papers.get_all_papers() == []

    def test_author_name_is_a_snapshot(self, system, people, paper_id):
        system.users.change_name(people["student"].user_id, "Samantha")
        assert system.papers.find_paper_by_id(paper_id).author_name == "Sam Student"

    def test_papers_by_author(self, system, people, paper_id):
        system.papers.submit_paper("Other", "", "", people["faculty"].user_id, [])
        mine = system.papers.get_papers_by_author(people["student"].user_id)
        assert [p.paper_id for p in mine] == [paper_id]


class TestAssignment:
    """Test reviewer assignment."""

    def test_assign_moves_to_in_progress(self, system, people, paper_id):
        outcome = system.papers.assign_reviewer(paper_id, people["faculty"].user_id)

        paper = system.papers.find_paper_by_id(paper_id)
        assert outcome
        assert paper.status == ReviewStatus.IN_PROGRESS
        assert paper.reviewer_ids == (people["faculty"].user_id,)

    def test_self_review_always_fails(self, system, people, paper_id):
        author_id = people["student"].user_id
        system.papers.assign_reviewer(paper_id, people["faculty"].user_id)
        before = system.papers.find_paper_by_id(paper_id)

        outcome = system.papers.assign_reviewer(paper_id, author_id)

        after = system.papers.find_paper_by_id(paper_id)
        assert outcome.kind == FailureKind.CONFLICT
        assert after.reviewer_ids == before.reviewer_ids
        assert after.status == before.status

    def test_assignment_is_idempotent(self, system, people, paper_id):
        reviewer = people["faculty"].user_id
        system.papers.assign_reviewer(paper_id, reviewer)
        assert system.papers.assign_reviewer(paper_id, reviewer)
        assert system.papers.get_reviewer_ids(paper_id) == (reviewer,)

    def test_unknown_paper_or_reviewer(self, system, people, paper_id):
        assert system.papers.assign_reviewer("nope", people["faculty"].user_id).kind == FailureKind.NOT_FOUND
        assert system.papers.assign_reviewer(paper_id, "ghost").kind == FailureKind.NOT_FOUND

    def test_non_admin_cannot_assign(self, system, people, paper_id):
        outcome = system.papers.assign_reviewer(
            paper_id, people["faculty"].user_id, acting_user=people["other"])
        assert outcome.kind == FailureKind.FORBIDDEN
        assert system.papers.get_reviewer_ids(paper_id) == ()

    def test_admin_can_assign(self, system, people, paper_id):
        assert system.papers.assign_reviewer(
            paper_id, people["faculty"].user_id, acting_user=people["admin"])

    def test_assign_overrides_decided_status(self, system, people, paper_id):
        system.papers.update_paper_status(paper_id, ReviewStatus.ACCEPTED)
        system.papers.assign_reviewer(paper_id, people["faculty"].user_id)
        assert system.papers.find_paper_by_id(paper_id).status == ReviewStatus.IN_PROGRESS


class TestRemoval:
    """Test reviewer removal."""

    def test_removing_all_reviewers_returns_to_pending(self, system, people, paper_id):
        reviewers = [people["faculty"].user_id, people["other"].user_id, people["admin"].user_id]
        for r in reviewers:
            system.papers.assign_reviewer(paper_id, r)

        for r in reviewers[:-1]:
            system.papers.remove_reviewer(paper_id, r)
            assert system.papers.find_paper_by_id(paper_id).status == ReviewStatus.IN_PROGRESS

        system.papers.remove_reviewer(paper_id, reviewers[-1])

        paper = system.papers.find_paper_by_id(paper_id)
        assert paper.reviewer_ids == ()
        assert paper.status == ReviewStatus.PENDING

    def test_remove_unassigned_reviewer(self, system, people, paper_id):
        outcome = system.papers.remove_reviewer(paper_id, people["faculty"].user_id)
        assert outcome.kind == FailureKind.NOT_FOUND

    def test_remove_from_unknown_paper(self, system, people):
        assert not system.papers.remove_reviewer("nope", people["faculty"].user_id)


class TestReviewerView:
    """Reviewers only ever see blinded papers."""

    def test_papers_for_reviewer_are_blinded(self, system, people, paper_id):
        system.papers.assign_reviewer(paper_id, people["faculty"].user_id)

        papers = system.papers.get_papers_for_reviewer(people["faculty"].user_id)

        assert len(papers) == 1
        assert papers[0].paper_id == paper_id
        assert papers[0].author_id == ANONYMOUS
        assert papers[0].author_name == ANONYMOUS

    def test_unassigned_reviewer_sees_nothing(self, system, people, paper_id):
        assert system.papers.get_papers_for_reviewer(people["other"].user_id) == []

    def test_stored_paper_keeps_author(self, system, people, paper_id):
        system.papers.assign_reviewer(paper_id, people["faculty"].user_id)
        system.papers.get_papers_for_reviewer(people["faculty"].user_id)
        assert system.papers.find_paper_by_id(paper_id).author_id == people["student"].user_id


class TestStatus:
    """Test explicit status changes."""

    @pytest.mark.parametrize("status", list(ReviewStatus))
    def test_any_status_reachable(self, system, paper_id, status):
        assert system.papers.update_paper_status(paper_id, status)
        assert system.papers.find_paper_by_id(paper_id).status == status

    def test_status_by_name(self, system, paper_id):
        assert system.papers.update_paper_status(paper_id, "rejected")
        assert system.papers.find_paper_by_id(paper_id).status == ReviewStatus.REJECTED

    def test_unknown_status_name_raises(self, system, paper_id):
        with pytest.raises(ValueError):
            system.papers.update_paper_status(paper_id, "MAYBE")

    def test_non_admin_cannot_change_status(self, system, people, paper_id):
        outcome = system.papers.update_paper_status(
            paper_id, ReviewStatus.ACCEPTED, acting_user=people["student"])
        assert outcome.kind == FailureKind.FORBIDDEN
        assert system.papers.find_paper_by_id(paper_id).status == ReviewStatus.PENDING

    def test_unknown_paper(self, system):
        assert system.papers.update_paper_status("nope", ReviewStatus.ACCEPTED).kind == FailureKind.NOT_FOUND

    def test_papers_by_status(self, system, people, paper_id):
        other = system.papers.submit_paper("Other", "", "", people["faculty"].user_id, []).value
        system.papers.update_paper_status(other, ReviewStatus.ACCEPTED)

        assert [p.paper_id for p in system.papers.get_papers_by_status("ACCEPTED")] == [other]
        assert [p.paper_id for p in system.papers.get_papers_by_status(ReviewStatus.PENDING)] == [paper_id]


class TestEditing:
    """Test content edits and deletion."""

    def test_author_edits_paper(self, system, people, paper_id):
        outcome = system.papers.edit_paper(
            paper_id, title="Graph Algorithms, 2nd ed.", keywords=["graphs"],
            acting_user=people["student"])

        paper = system.papers.find_paper_by_id(paper_id)
        assert outcome
        assert paper.title == "Graph Algorithms, 2nd ed."
        assert paper.keywords == ("graphs",)
        assert paper.abstract_text == "Shortest paths revisited"

    def test_stranger_cannot_edit(self, system, people, paper_id):
        outcome = system.papers.edit_paper(paper_id, title="Hijacked", acting_user=people["faculty"])
        assert outcome.kind == FailureKind.FORBIDDEN
        assert system.papers.find_paper_by_id(paper_id).title == "Graph Algorithms"

    def test_update_paper_replaces_wholesale(self, system, paper_id):
        paper = system.papers.find_paper_by_id(paper_id)
        paper.content = "Rewritten"
        assert system.papers.update_paper(paper)
        assert system.papers.find_paper_by_id(paper_id).content == "Rewritten"

    def test_delete_paper(self, system, people, paper_id):
        assert system.papers.delete_paper(paper_id, acting_user=people["admin"])
        assert system.papers.find_paper_by_id(paper_id) is None
        assert system.papers.delete_paper(paper_id).kind == FailureKind.NOT_FOUND

    def test_non_admin_cannot_delete(self, system, people, paper_id):
        assert system.papers.delete_paper(paper_id, acting_user=people["student"]).kind == FailureKind.FORBIDDEN


class TestSearch:
    """Test keyword search."""

    def test_case_insensitive_substring(self, system, people, paper_id):
        system.papers.submit_paper("Proteins", "", "", people["faculty"].user_id, ["Biology"])

        assert [p.paper_id for p in system.papers.search_papers_by_keyword("GRAPH")] == [paper_id]
        assert [p.title for p in system.papers.search_papers_by_keyword("bio")] == ["Proteins"]
        assert system.papers.search_papers_by_keyword("chemistry") == []


class TestBlindedWriteBack:
    """A reviewer's blinded view never replaces the stored paper."""

    def test_update_with_blinded_copy_refused(self, system, people, paper_id):
        reviewer = people["faculty"].user_id
        system.papers.assign_reviewer(paper_id, reviewer)
        blinded = system.papers.get_papers_for_reviewer(reviewer)[0]
        blinded.title = "Edited by a reviewer"

        outcome = system.papers.update_paper(blinded)

        paper = system.papers.find_paper_by_id(paper_id)
        assert outcome.kind == FailureKind.FORBIDDEN
        assert paper.author_id == people["student"].user_id
        assert paper.author_name == "Sam Student"
        assert paper.title == "Graph Algorithms"
        assert len(system.papers.get_papers_by_author(people["student"].user_id)) == 1

    def test_store_refuses_blinded_paper(self, system, people, paper_id):
        blinded = system.papers.find_paper_by_id(paper_id).blinded_copy()
        assert system.repo.papers.update(blinded) is False
        assert system.papers.find_paper_by_id(paper_id).author_id == people["student"].user_id
