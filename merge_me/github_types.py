import typing


MergeableState = typing.Literal["CONFLICTING", "MERGEABLE", "UNKNOWN"]
PullRequestState = typing.Literal["CLOSED", "MERGED", "OPEN"]
MergeStateStatus = typing.Literal[
    "BEHIND",
    "BLOCKED",
    "CLEAN",
    "DIRTY",
    "DRAFT",
    "HAS_HOOKS",
    "UNKNOWN",
    "UNSTABLE",
]
ReviewState = typing.Literal[
    "APPROVED",
    "CHANGES_REQUESTED",
    "COMMENTED",
    "DISMISSED",
    "PENDING",
]


class Actor(typing.TypedDict):
    login: str


class Review(typing.TypedDict):
    state: str


class ReviewEdge(typing.TypedDict):
    node: Review | None


class ReviewConnection(typing.TypedDict):
    edges: list[ReviewEdge | None]


class CommitMessage(typing.TypedDict):
    message: str
    messageHeadline: str


class CommitMessageNode(typing.TypedDict):
    commit: CommitMessage


class CommitMessageEdge(typing.TypedDict):
    node: CommitMessageNode


class CommitMessageConnection(typing.TypedDict):
    edges: list[CommitMessageEdge]


class PullRequest(typing.TypedDict):
    author: Actor | None
    commits: CommitMessageConnection
    id: str
    mergeStateStatus: typing.NotRequired[str | None]
    mergeable: str
    merged: bool
    number: int
    reviews: ReviewConnection
    state: str
    title: str


class PullRequestNodes(typing.TypedDict):
    nodes: list[PullRequest]


class PullRequestsRepository(typing.TypedDict):
    pullRequests: PullRequestNodes


class FindPullRequestsInfoByReferenceNameResponse(typing.TypedDict):
    repository: PullRequestsRepository | None


class PullRequestRepository(typing.TypedDict):
    pullRequest: PullRequest | None


class FindPullRequestInfoByNumberResponse(typing.TypedDict):
    repository: PullRequestRepository | None


class CommitUser(typing.TypedDict):
    login: str


class CommitAuthor(typing.TypedDict):
    user: CommitUser | None


class Signature(typing.TypedDict):
    isValid: bool


class Commit(typing.TypedDict):
    author: CommitAuthor | None
    signature: Signature | None


class PullRequestCommitNode(typing.TypedDict):
    commit: Commit


class PullRequestCommitEdge(typing.TypedDict):
    node: PullRequestCommitNode


class PageInfo(typing.TypedDict):
    endCursor: str | None
    hasNextPage: bool


class Connection(typing.TypedDict):
    edges: list[typing.Any]
    pageInfo: PageInfo


class PullRequestCommits(typing.TypedDict):
    commits: Connection


class PullRequestCommitsRepository(typing.TypedDict):
    pullRequest: PullRequestCommits | None


class FindPullRequestCommitsResponse(typing.TypedDict):
    repository: PullRequestCommitsRepository | None
