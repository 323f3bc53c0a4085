"""GraphQL documents sent to the admin API."""

PRODUCTS_QUERY = """
query getProducts(
  $query: String
  $sortKey: ProductSortKeys
  $reverse: Boolean
  $after: String
  $before: String
  $first: Int
  $last: Int
) {
  products(
    query: $query
    sortKey: $sortKey
    reverse: $reverse
    after: $after
    before: $before
    first: $first
    last: $last
  ) {
    pageInfo {
      hasNextPage
      hasPreviousPage
      startCursor
      endCursor
    }
    edges {
      cursor
      node {
        id
        title
        status
        descriptionHtml
        totalInventory
        createdAt
        publishedAt
        collections(first: 10) {
          edges { node { title } }
        }
        images(first: 1) {
          edges { node { url altText } }
        }
        variants(first: 1) {
          edges {
            node {
              sku
              price
              barcode
              inventoryQuantity
              image { url altText }
              inventoryItem { id }
            }
          }
        }
      }
    }
  }
}
"""

COLLECTIONS_AND_TAGS_QUERY = """
query getCollectionsAndTags {
  collections(first: 100) { edges { node { id title } } }
  productTags(first: 100) { edges { node } }
}
"""
