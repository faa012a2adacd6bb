"""
Data factories for generating realistic documents for elastinest tests.

These factories use Faker and Factory Boy to generate projects, developers
and commit activity with the field shapes the document classes expect.
"""

from datetime import timezone

import factory
from faker import Faker
from faker.providers import BaseProvider

from elastinest import JoinField
from tests.domain import CommitActivity, Developer, Project

fake = Faker()
Faker.seed(1234)


class ProjectProvider(BaseProvider):
    """Custom Faker provider for project data."""

    PROJECT_NAMES = [
        "NEST", "Elasticsearch.Net", "Kibana", "Logstash", "Beats", "Curator",
        "Watcher", "Marvel", "Shield", "Rally", "Eland", "Ecctl",
    ]

    STATES = ["BellyUp", "Stable", "VeryActive"]

    COMMIT_VERBS = ["Fix", "Add", "Remove", "Refactor", "Document", "Rename", "Test"]

    COMMIT_SUBJECTS = [
        "connection pool resurrection", "sniff on startup", "bulk serialization",
        "index name inference", "dis_max query", "template settings",
        "ping timeout", "audit trail", "retry timeout",
    ]

    def project_name(self) -> str:
        return self.random_element(self.PROJECT_NAMES)

    def project_state(self) -> str:
        return self.random_element(self.STATES)

    def commit_message(self) -> str:
        return f"{self.random_element(self.COMMIT_VERBS)} {self.random_element(self.COMMIT_SUBJECTS)}"


fake.add_provider(ProjectProvider)


class DeveloperFactory(factory.Factory):
    """Factory for developers."""

    class Meta:
        model = Developer

    id = factory.Sequence(lambda n: n + 1)
    first_name = factory.LazyFunction(lambda: fake.first_name())
    last_name = factory.LazyFunction(lambda: fake.last_name())
    email = factory.LazyFunction(lambda: fake.email())


class ProjectFactory(factory.Factory):
    """Factory for projects; every project is the parent side of the join."""

    class Meta:
        model = Project

    name = factory.Sequence(lambda n: f"{fake.project_name()}-{n}")
    description = factory.LazyFunction(lambda: fake.sentence(nb_words=8))
    state = factory.LazyFunction(lambda: fake.project_state())
    start_date = factory.LazyFunction(lambda: fake.date_time_this_decade(tzinfo=timezone.utc))
    lead_developer = factory.SubFactory(DeveloperFactory)
    number_of_commits = factory.LazyFunction(lambda: fake.random_int(min=0, max=5000))
    join = factory.LazyFunction(lambda: JoinField.root(Project))


class CommitActivityFactory(factory.Factory):
    """Factory for commits, linked to a parent project."""

    class Meta:
        model = CommitActivity

    id = factory.LazyFunction(lambda: fake.sha1()[:10])
    project_name = factory.LazyFunction(lambda: fake.project_name())
    message = factory.LazyFunction(lambda: fake.commit_message())
    size = factory.LazyFunction(lambda: fake.random_int(min=1, max=400))
    join = factory.LazyAttribute(lambda o: JoinField.link(CommitActivity, o.project_name))


class ProjectDocumentFactory(factory.Factory):
    """Projects as plain dictionaries, the way untyped callers index them."""

    class Meta:
        model = dict

    name = factory.Iterator(ProjectProvider.PROJECT_NAMES)
    state = factory.Iterator(ProjectProvider.STATES)
    numberOfCommits = factory.LazyFunction(lambda: fake.random_int(min=0, max=5000))


def create_projects(count: int = 10) -> list[Project]:
    """Create projects with unique names."""
    return ProjectFactory.build_batch(count)


def create_commits_for(project: Project, count: int = 5) -> list[CommitActivity]:
    """Create commits that belong to one project."""
    return CommitActivityFactory.build_batch(count, project_name=project.name)
