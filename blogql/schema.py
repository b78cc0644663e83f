""" The blog GraphQL schema """

import graphql

from blogql.resolvers import RESOLVERS, bind_resolvers


# language=graphql
SDL = '''
type User {
    id: ID!
    name: String!
    email: String!
    photo: String
    posts(first: Int, offset: Int): [Post!]!
}

type Post {
    id: ID!
    title: String!
    content: String!
    photo: String!
    author: User
    comments(first: Int, offset: Int): [Comment!]!
}

type Comment {
    id: ID!
    comment: String!
    user: User
    post: Post
}

input UserInput {
    name: String
    email: String
    photo: String
}

input PostInput {
    title: String!
    content: String!
    photo: String!
}

input CommentInput {
    comment: String!
    post: ID!
}

type Query {
    users(first: Int, offset: Int): [User!]!
    user(id: ID!): User
    currentUser: User
    posts(first: Int, offset: Int): [Post!]!
    post(id: ID!): Post
    commentsByPost(postId: ID!, first: Int, offset: Int): [Comment!]!
}

type Mutation {
    updateUser(input: UserInput!): User
    deleteUser: Boolean!
    createPost(input: PostInput!): Post
    updatePost(id: ID!, input: PostInput!): Post
    deletePost(id: ID!): Boolean!
    createComment(input: CommentInput!): Comment
    updateComment(id: ID!, input: CommentInput!): Comment
    deleteComment(id: ID!): Boolean!
}
'''


def make_schema() -> graphql.GraphQLSchema:
    """ Build the schema, with resolvers bound """
    return bind_resolvers(graphql.build_schema(SDL), RESOLVERS)
