"""
GraphQL documents for the discussions tools.

Listing connections are declared as ``ConnectionQuery`` instances so that
their documents are rendered per variant; point lookups and mutations are
fixed documents.
"""

from typing import Final

from gh_discussions.discussions.fragments import CategoryNode, CommentNode, DiscussionNode
from gh_discussions.discussions.variants import ConnectionQuery

REPOSITORY_SCOPE: Final = (("repository", "owner: $owner, name: $repo"),)
REPOSITORY_VARIABLES: Final = (("owner", "String!"), ("repo", "String!"))

DISCUSSION_ORDER_FIELDS: Final = frozenset({"CREATED_AT", "UPDATED_AT"})

# ─── Connections ──────────────────────────────────────────

DISCUSSIONS_CONNECTION: Final = ConnectionQuery(
    operation="ListDiscussions",
    scope=REPOSITORY_SCOPE,
    scope_variables=REPOSITORY_VARIABLES,
    connection="discussions",
    node_selection=(
        "number title createdAt updatedAt closed isAnswered answerChosenAt "
        "author { login } category { name } url"
    ),
    node_model=DiscussionNode,
    filter_argument="categoryId",
    filter_type="ID!",
    order_field_type="DiscussionOrderField!",
    order_fields=DISCUSSION_ORDER_FIELDS,
)

DISCUSSION_COMMENTS_CONNECTION: Final = ConnectionQuery(
    operation="GetDiscussionComments",
    scope=REPOSITORY_SCOPE + (("discussion", "number: $discussionNumber"),),
    scope_variables=REPOSITORY_VARIABLES + (("discussionNumber", "Int!"),),
    connection="comments",
    node_selection="id body url",
    node_model=CommentNode,
)

DISCUSSION_CATEGORIES_CONNECTION: Final = ConnectionQuery(
    operation="ListDiscussionCategories",
    scope=REPOSITORY_SCOPE,
    scope_variables=REPOSITORY_VARIABLES,
    connection="discussionCategories",
    node_selection="id name",
    node_model=CategoryNode,
)

# ─── Point lookups ────────────────────────────────────────

GET_DISCUSSION: Final = """
query GetDiscussion($owner: String!, $repo: String!, $discussionNumber: Int!) {
  repository(owner: $owner, name: $repo) {
    discussion(number: $discussionNumber) {
      number
      title
      body
      createdAt
      closed
      isAnswered
      answerChosenAt
      url
      category { name }
    }
  }
}
"""

# The ID lookups can carry the repository's categories along, so a mutation
# that names its category still needs only one call before it is sent.

GET_DISCUSSION_ID: Final = """
query GetDiscussionId(
  $owner: String!, $repo: String!, $discussionNumber: Int!,
  $withCategories: Boolean = false, $categoryLimit: Int = 100
) {
  repository(owner: $owner, name: $repo) {
    discussion(number: $discussionNumber) { id }
    discussionCategories(first: $categoryLimit) @include(if: $withCategories) {
      nodes { id name }
    }
  }
}
"""

GET_REPOSITORY_ID: Final = """
query GetRepositoryId(
  $owner: String!, $repo: String!,
  $withCategories: Boolean = false, $categoryLimit: Int = 100
) {
  repository(owner: $owner, name: $repo) {
    id
    discussionCategories(first: $categoryLimit) @include(if: $withCategories) {
      nodes { id name }
    }
  }
}
"""

# ─── Mutations ────────────────────────────────────────────

CREATE_DISCUSSION: Final = """
mutation CreateDiscussion($input: CreateDiscussionInput!) {
  createDiscussion(input: $input) {
    discussion { id number url }
  }
}
"""

UPDATE_DISCUSSION: Final = """
mutation UpdateDiscussion($input: UpdateDiscussionInput!) {
  updateDiscussion(input: $input) {
    discussion { id number url }
  }
}
"""

ADD_DISCUSSION_COMMENT: Final = """
mutation AddDiscussionComment($input: AddDiscussionCommentInput!) {
  addDiscussionComment(input: $input) {
    comment { id url }
  }
}
"""

UPDATE_DISCUSSION_COMMENT: Final = """
mutation UpdateDiscussionComment($input: UpdateDiscussionCommentInput!) {
  updateDiscussionComment(input: $input) {
    comment { id url }
  }
}
"""

DELETE_DISCUSSION_COMMENT: Final = """
mutation DeleteDiscussionComment($input: DeleteDiscussionCommentInput!) {
  deleteDiscussionComment(input: $input) {
    clientMutationId
  }
}
"""
