"""Seed authors, demo accounts, and sample articles with blocks."""

from django.core.management.base import BaseCommand
from django.db import transaction

from articles.blocks import BlockStore
from articles.models import Article, ArticleStatus, Author
from authentication.models import User

SEED_AUTHORS = ["Ada Lovelace", "Grace Hopper"]
# email -> (role, password); demo credentials for local use only.
SEED_USERS = {
    "editor@example.com": (User.Role.EDITOR, "editorpass"),
    "student@example.com": (User.Role.STUDENT, "studentpass"),
}
SEED_ARTICLES = [
    {
        "title": "Welcome to the publication",
        "author": "Ada Lovelace",
        "status": ArticleStatus.PUBLISHED,
        "blocks": [
            ("text", {"body": "Our first published article."}),
            ("image", {"url": "covers/welcome.png", "alt": "Masthead"}),
        ],
    },
    {
        "title": "Work in progress",
        "author": "Grace Hopper",
        "status": ArticleStatus.DRAFT,
        "blocks": [("text", {"body": "Still being written."})],
    },
]


def create_seed_authors() -> dict[str, Author]:
    """Create seed authors if missing and return a name->Author map."""
    authors = {}
    for name in SEED_AUTHORS:
        author, _ = Author.objects.get_or_create(name=name)
        authors[name] = author
    return authors


def create_seed_users() -> dict[str, User]:
    """Create demo accounts if missing and return an email->User map."""
    users = {}
    for email, (role, password) in SEED_USERS.items():
        user = User.objects.filter(email__iexact=email).first()
        if user is None:
            if role == User.Role.EDITOR:
                user = User.objects.create_editor(email, password)
            else:
                user = User.objects.create_user(email, password, role=role)
        users[email] = user
    return users


def create_seed_articles(authors: dict[str, Author]) -> list[Article]:
    """Create sample articles with their blocks; existing titles are left alone."""
    blocks = BlockStore()
    articles = []
    for entry in SEED_ARTICLES:
        article, created = Article.objects.get_or_create(
            title=entry["title"],
            defaults={"author": authors.get(entry["author"]), "status": entry["status"]},
        )
        if created:
            for position, (block_type, payload) in enumerate(entry["blocks"]):
                blocks.append(article.id, block_type, payload, position)
        articles.append(article)
    return articles


class Command(BaseCommand):
    """Management command to seed authors, demo users, and articles."""

    help = (
        "Seed authors, demo editor/student accounts, and sample articles. "
        "Use --reset to clear previously seeded data first."
    )

    def add_arguments(self, parser):
        parser.add_argument(
            "--reset",
            action="store_true",
            help="Remove the seeded users, articles, and authors before seeding.",
        )

    def handle(self, *args, **options):
        """Entrypoint for the management command."""
        with transaction.atomic():
            if options.get("reset"):
                self._reset_seeded_data()

            self.stdout.write("Seeding content...")
            authors = create_seed_authors()
            create_seed_users()
            articles = create_seed_articles(authors)
        self.stdout.write(self.style.SUCCESS(f"Seed completed ({len(articles)} articles)."))

    def _reset_seeded_data(self) -> None:
        """Remove only what this command creates; blocks go with their articles."""
        self.stdout.write("Resetting previously seeded content...")
        User.objects.filter(email__in=list(SEED_USERS)).delete()
        Article.objects.filter(title__in=[entry["title"] for entry in SEED_ARTICLES]).delete()
        Author.objects.filter(name__in=SEED_AUTHORS).delete()
        self.stdout.write(self.style.WARNING("Seeded content cleared."))
