#!/usr/bin/env python3
"""
Peer Review - command line entry point.

One command per invocation; nothing is prompted for. Commands that act on
behalf of a user take --login/--password.
"""

import sys
import argparse
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich import box

from config import load_settings
from models import ANONYMOUS, Admin, Faculty, Outcome, Paper, ReviewStatus, Student, UserBase
from services import ReviewSystem, build_system

console = Console()


# === Output helpers ===

def _fail(message: str) -> int:
    console.print(f"[red]{message}[/red]")
    return 1


def _report(outcome: Outcome, success: str) -> int:
    if not outcome:
        return _fail(outcome.reason)
    console.print(f"[green]{success}[/green]")
    return 0


def _papers_table(system: ReviewSystem, papers: list[Paper], title: str, fmt: str) -> Table:
    table = Table(title=title, box=box.SIMPLE)
    table.add_column("ID", overflow="fold")
    table.add_column("Title", overflow="fold")
    table.add_column("Author")
    table.add_column("Status")
    table.add_column("Reviewers", justify="right")
    table.add_column("Submitted")

    for paper in papers:
        if paper.author_id == ANONYMOUS:
            author = ANONYMOUS
        else:
            author = system.users.display_name(paper.author_id)
        table.add_row(
            paper.paper_id,
            paper.title,
            author,
            paper.status.value,
            str(len(paper.reviewer_ids)),
            paper.submission_date.strftime(fmt),
        )
    return table


# === Session ===

def _authenticate(system: ReviewSystem, args) -> Optional[UserBase]:
    if not args.login:
        _fail("This command needs --login and --password")
        return None
    user = system.users.login(args.login, args.password or "")
    if user is None:
        _fail("Invalid email or password")
    return user


def _authenticate_admin(system: ReviewSystem, args) -> Optional[UserBase]:
    user = _authenticate(system, args)
    if user is not None and not user.is_admin:
        _fail("This command requires an admin account")
        return None
    return user


# === Commands ===

def cmd_init(system: ReviewSystem, args, settings) -> int:
    admins = system.users.get_admins()
    console.print(f"Data directory: [bold]{settings.data_dir}[/bold] ({settings.backend})")
    console.print(f"Users: {len(system.users.get_all())}  Admins: {len(admins)}")
    return 0


def cmd_register(system: ReviewSystem, args, settings) -> int:
    if args.kind == "student":
        outcome = system.users.register_student(
            args.name, args.email, args.secret, args.department, args.student_id)
    elif args.kind == "faculty":
        outcome = system.users.register_faculty(
            args.name, args.email, args.secret, args.department, args.position,
            is_reviewer=not args.no_review)
    else:
        if _authenticate_admin(system, args) is None:
            return 1
        outcome = system.users.register_admin(args.name, args.email, args.secret, args.level)
    return _report(outcome, f"Registered {args.kind} {args.email} ({outcome.value})")


def cmd_users(system: ReviewSystem, args, settings) -> int:
    if _authenticate_admin(system, args) is None:
        return 1

    table = Table(title="Users", box=box.SIMPLE)
    table.add_column("ID", overflow="fold")
    table.add_column("Name")
    table.add_column("Email")
    table.add_column("Role")
    for user in system.users.get_all():
        table.add_row(user.user_id, user.name, user.email, user.role)
    console.print(table)
    return 0


def cmd_passwd(system: ReviewSystem, args, settings) -> int:
    user = _authenticate(system, args)
    if user is None:
        return 1
    return _report(system.users.change_password(user.user_id, args.new_password),
                   "Password changed")


def cmd_submit(system: ReviewSystem, args, settings) -> int:
    user = _authenticate(system, args)
    if user is None:
        return 1
    keywords = [k.strip() for k in (args.keywords or "").split(",") if k.strip()]
    outcome = system.papers.submit_paper(
        args.title, args.abstract, args.content, user.user_id, keywords)
    return _report(outcome, f"Submitted paper {outcome.value}")


def cmd_papers(system: ReviewSystem, args, settings) -> int:
    user = _authenticate(system, args)
    if user is None:
        return 1

    if args.assigned:
        papers, title = system.papers.get_papers_for_reviewer(user.user_id), "Assigned to you"
    elif args.search:
        papers, title = system.papers.search_papers_by_keyword(args.search), f"Keyword: {args.search}"
    elif args.status:
        papers, title = system.papers.get_papers_by_status(args.status), f"Status: {args.status}"
    elif args.mine or not user.is_admin:
        papers, title = system.papers.get_papers_by_author(user.user_id), "Your papers"
    else:
        papers, title = system.papers.get_all_papers(), "All papers"

    # Only admins and authors see who wrote what
    if not user.is_admin and not args.assigned:
        papers = [p if p.author_id == user.user_id else p.blinded_copy() for p in papers]

    if not papers:
        console.print("No papers found.")
        return 0
    console.print(_papers_table(system, papers, title, settings.date_format))
    return 0


def _details_table(rows: list[tuple[str, str]]) -> Table:
    table = Table(box=box.SIMPLE, show_header=False)
    table.add_column("Field", style="bold")
    table.add_column("Value", overflow="fold")
    for label, value in rows:
        table.add_row(label, value)
    return table


def cmd_paper(system: ReviewSystem, args, settings) -> int:
    user = _authenticate(system, args)
    if user is None:
        return 1
    paper = system.papers.find_paper_by_id(args.paper_id)
    if paper is None:
        return _fail(f"Paper {args.paper_id} not found")

    if not (user.is_admin or user.user_id == paper.author_id):
        paper = paper.blinded_copy()

    # Reviewer identities stay hidden from everyone but admins
    if user.is_admin:
        reviewers = ", ".join(system.users.display_name(r) for r in paper.reviewer_ids) or "-"
    else:
        reviewers = str(len(paper.reviewer_ids))

    console.print(Panel(Text(paper.title), box=box.ROUNDED))
    console.print(_details_table([
        ("ID", paper.paper_id),
        ("Author", ANONYMOUS if paper.is_blinded else paper.author_name),
        ("Status", paper.status.value),
        ("Submitted", paper.submission_date.strftime(settings.date_format)),
        ("Keywords", ", ".join(paper.keywords) or "-"),
        ("Reviewers", reviewers),
    ]))
    console.print("[bold]Abstract[/bold]")
    console.print(paper.abstract_text or "-", markup=False)
    console.print("[bold]Content[/bold]")
    console.print(paper.content or "-", markup=False)
    return 0


def cmd_profile(system: ReviewSystem, args, settings) -> int:
    user = _authenticate(system, args)
    if user is None:
        return 1

    target = user
    if args.email and args.email != user.email:
        if not user.is_admin:
            return _fail("Only admins can view other users")
        target = system.users.find_by_email(args.email)
        if target is None:
            return _fail(f"No user with email {args.email}")

    rows = [
        ("ID", target.user_id),
        ("Name", target.name),
        ("Email", target.email),
        ("Role", target.role),
    ]
    if isinstance(target, Student):
        rows += [("Department", target.department or "-"), ("Student ID", target.student_id or "-")]
    elif isinstance(target, Faculty):
        rows += [
            ("Department", target.department or "-"),
            ("Position", target.position or "-"),
            ("Reviewer", "yes" if target.is_reviewer else "no"),
        ]
    elif isinstance(target, Admin):
        rows += [("Admin level", target.admin_level or "-")]
    rows.append(("Papers", str(len(system.papers.get_papers_by_author(target.user_id)))))

    console.print(_details_table(rows))
    return 0


def _reviewer_by_email(system: ReviewSystem, email: str) -> Optional[UserBase]:
    reviewer = system.users.find_by_email(email)
    if reviewer is None:
        _fail(f"No user with email {email}")
    return reviewer


def cmd_assign(system: ReviewSystem, args, settings) -> int:
    admin = _authenticate_admin(system, args)
    if admin is None:
        return 1
    reviewer = _reviewer_by_email(system, args.reviewer)
    if reviewer is None:
        return 1
    outcome = system.papers.assign_reviewer(args.paper_id, reviewer.user_id, acting_user=admin)
    return _report(outcome, f"Assigned {reviewer.name} to {args.paper_id}")


def cmd_unassign(system: ReviewSystem, args, settings) -> int:
    admin = _authenticate_admin(system, args)
    if admin is None:
        return 1
    reviewer = _reviewer_by_email(system, args.reviewer)
    if reviewer is None:
        return 1
    outcome = system.papers.remove_reviewer(args.paper_id, reviewer.user_id, acting_user=admin)
    return _report(outcome, f"Removed {reviewer.name} from {args.paper_id}")


def cmd_status(system: ReviewSystem, args, settings) -> int:
    admin = _authenticate_admin(system, args)
    if admin is None:
        return 1
    outcome = system.papers.update_paper_status(args.paper_id, args.status, acting_user=admin)
    return _report(outcome, f"Paper {args.paper_id} is now {args.status.upper()}")


def cmd_review(system: ReviewSystem, args, settings) -> int:
    user = _authenticate(system, args)
    if user is None:
        return 1
    outcome = system.reviews.submit_review(args.paper_id, user.user_id, args.rating, args.comments)
    return _report(outcome, f"Review {outcome.value} submitted")


def cmd_reviews(system: ReviewSystem, args, settings) -> int:
    user = _authenticate(system, args)
    if user is None:
        return 1
    paper = system.papers.find_paper_by_id(args.paper_id)
    if paper is None:
        return _fail(f"Paper {args.paper_id} not found")
    if not (user.is_admin or user.user_id == paper.author_id):
        return _fail("Only the author or an admin can view these reviews")

    reviews = system.reviews.get_reviews_for_paper(args.paper_id, viewer=user)
    table = Table(title=f"Reviews for '{paper.title}'", box=box.SIMPLE)
    table.add_column("Reviewer")
    table.add_column("Rating", justify="right")
    table.add_column("Comments", overflow="fold")
    table.add_column("Submitted")
    for review in reviews:
        if review.is_blinded:
            reviewer = ANONYMOUS
        else:
            reviewer = system.users.display_name(review.reviewer_id)
        table.add_row(reviewer, str(review.rating), review.comments,
                      review.submission_date.strftime(settings.date_format))
    console.print(table)
    console.print(f"Average rating: {system.reviews.get_average_paper_rating(args.paper_id):.2f}")
    return 0


def cmd_delete_user(system: ReviewSystem, args, settings) -> int:
    admin = _authenticate_admin(system, args)
    if admin is None:
        return 1
    target = system.users.find_by_email(args.email)
    if target is None:
        return _fail(f"No user with email {args.email}")
    return _report(system.users.delete_user(target.user_id, acting_user=admin),
                   f"Deleted {args.email}")


def cmd_delete_paper(system: ReviewSystem, args, settings) -> int:
    admin = _authenticate_admin(system, args)
    if admin is None:
        return 1
    return _report(system.papers.delete_paper(args.paper_id, acting_user=admin),
                   f"Deleted paper {args.paper_id}")


COMMANDS = {
    "init": cmd_init,
    "register": cmd_register,
    "users": cmd_users,
    "passwd": cmd_passwd,
    "submit": cmd_submit,
    "papers": cmd_papers,
    "paper": cmd_paper,
    "profile": cmd_profile,
    "assign": cmd_assign,
    "unassign": cmd_unassign,
    "status": cmd_status,
    "review": cmd_review,
    "reviews": cmd_reviews,
    "delete-user": cmd_delete_user,
    "delete-paper": cmd_delete_paper,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="peer-review",
        description="Paper submission and double-blind peer review",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  peer-review init
  peer-review register student "Sam" s@x.edu pw --department CS --student-id 42
  peer-review --login s@x.edu --password pw submit "Graph Algorithms" --keywords graphs
  peer-review --login admin@scis.edu --password admin123 assign PAPER_ID f@x.edu
  peer-review --login f@x.edu --password pw review PAPER_ID 4 "Solid"
        """
    )
    parser.add_argument("--login", metavar="EMAIL", help="Act as this user")
    parser.add_argument("--password", help="Password for --login")
    parser.add_argument("--data-dir", type=Path, help="Override the data directory")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("init", help="Create storage and the default admin")

    register = sub.add_parser("register", help="Register a user")
    kinds = register.add_subparsers(dest="kind", required=True)
    for kind in ("student", "faculty", "admin"):
        p = kinds.add_parser(kind)
        p.add_argument("name")
        p.add_argument("email")
        p.add_argument("secret", metavar="password")
        if kind == "student":
            p.add_argument("--department", default="")
            p.add_argument("--student-id", default="")
        elif kind == "faculty":
            p.add_argument("--department", default="")
            p.add_argument("--position", default="")
            p.add_argument("--no-review", action="store_true", help="Not available as a reviewer")
        else:
            p.add_argument("--level", default="Department Admin")

    sub.add_parser("users", help="List users (admin)")

    p = sub.add_parser("passwd", help="Change your password")
    p.add_argument("new_password")

    p = sub.add_parser("submit", help="Submit a paper")
    p.add_argument("title")
    p.add_argument("--abstract", default="")
    p.add_argument("--content", default="")
    p.add_argument("--keywords", help="Comma-separated")

    p = sub.add_parser("papers", help="List papers")
    group = p.add_mutually_exclusive_group()
    group.add_argument("--mine", action="store_true")
    group.add_argument("--assigned", action="store_true", help="Papers you are reviewing")
    group.add_argument("--status", choices=[s.value for s in ReviewStatus], type=str.upper)
    group.add_argument("--search", metavar="TERM")

    p = sub.add_parser("paper", help="Show one paper in full")
    p.add_argument("paper_id")

    p = sub.add_parser("profile", help="Show your profile, or another user's (admin)")
    p.add_argument("email", nargs="?")

    for name, help_text in (("assign", "Assign a reviewer (admin)"),
                            ("unassign", "Remove a reviewer (admin)")):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("paper_id")
        p.add_argument("reviewer", metavar="REVIEWER_EMAIL")

    p = sub.add_parser("status", help="Set paper status (admin)")
    p.add_argument("paper_id")
    p.add_argument("status", choices=[s.value for s in ReviewStatus], type=str.upper)

    p = sub.add_parser("review", help="Submit a review")
    p.add_argument("paper_id")
    p.add_argument("rating", type=int)
    p.add_argument("comments")

    p = sub.add_parser("reviews", help="Show reviews for a paper")
    p.add_argument("paper_id")

    p = sub.add_parser("delete-user", help="Delete a user (admin)")
    p.add_argument("email")

    p = sub.add_parser("delete-paper", help="Delete a paper (admin)")
    p.add_argument("paper_id")

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Parse arguments, run one command and return its exit status."""
    args = build_parser().parse_args(argv)

    settings = load_settings()
    if args.data_dir:
        settings.data_dir = args.data_dir
    system = build_system(settings)

    return COMMANDS[args.command](system, args, settings)


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
