"""
Cypher statements for every domain operation.

Each constant is a single parameterized statement. Merge-vs-create semantics
are part of the contract:
- MERGE: User (by email), Item (by name), SELLS, BOUGHT, APPLIES,
  REQUESTS_MENTORSHIP (by pair + topic)
- CREATE: Job, Mentorship and their POSTED / MENTORS edges

Seed statements merge Users and Items too, so a dataset can be loaded on top
of existing data.

Link statements that MATCH a missing endpoint produce zero rows and write
nothing; they report how many edges they touched through ``linked``.
"""

# =============================================================================
# Users
# =============================================================================

UPSERT_USER = """
MERGE (u:User {email: $email})
SET u.name = $name, u.password = $password, u.role = $role, u.dept = $dept
RETURN u.email AS email
"""

GET_USER = """
MATCH (u:User {email: $email})
RETURN u.name AS name, u.email AS email, u.password AS password,
       u.role AS role, u.dept AS dept
LIMIT 1
"""

LIST_USERS = """
MATCH (u:User)
RETURN u.name AS name, u.email AS email, u.role AS role, u.dept AS dept
LIMIT $limit
"""

# =============================================================================
# Items
# =============================================================================

ADD_ITEM = """
MATCH (u:User {email: $email})
MERGE (i:Item {name: $item})
MERGE (u)-[:SELLS]->(i)
RETURN count(i) AS linked
"""

LIST_ITEMS = """
MATCH (u:User)-[:SELLS]->(i:Item)
RETURN DISTINCT u.name AS seller, i.name AS item
LIMIT $limit
"""

BUY_ITEM = """
MATCH (u:User {email: $email}), (i:Item {name: $item})
MERGE (u)-[:BOUGHT]->(i)
RETURN count(i) AS linked
"""

# =============================================================================
# Jobs
# =============================================================================

POST_JOB = """
MATCH (u:User {email: $email})
CREATE (j:Job {title: $title, desc: $desc, postedAt: datetime()})
CREATE (u)-[:POSTED]->(j)
RETURN count(j) AS linked
"""

LIST_JOBS = """
MATCH (u:User)-[:POSTED]->(j:Job)
RETURN j.title AS title, j.desc AS desc, u.name AS poster,
       toString(j.postedAt) AS postedAt
ORDER BY j.postedAt DESC
LIMIT $limit
"""

# Duplicate titles resolve to the earliest posted job.
APPLY_TO_JOB = """
MATCH (s:User {email: $email})
MATCH (j:Job {title: $title})
WITH s, j
ORDER BY j.postedAt ASC
LIMIT 1
MERGE (s)-[a:APPLIES]->(j)
ON CREATE SET a.appliedAt = datetime()
RETURN count(j) AS linked
"""

# =============================================================================
# Mentorship
# =============================================================================

OFFER_MENTORSHIP = """
MATCH (f:User {email: $email})
CREATE (m:Mentorship {topic: $topic, note: $note, capacity: $capacity})
CREATE (f)-[:MENTORS]->(m)
RETURN count(m) AS linked
"""

REQUEST_MENTORSHIP = """
MATCH (s:User {email: $studentEmail}), (f:User {email: $facultyEmail, role: 'Faculty'})
MERGE (s)-[r:REQUESTS_MENTORSHIP {topic: $topic}]->(f)
ON CREATE SET r.when = datetime()
RETURN count(r) AS linked
"""

LIST_MENTORS = """
MATCH (f:User {role: 'Faculty'})
OPTIONAL MATCH (f)-[:MENTORS]->(m:Mentorship)
RETURN f.name AS name, f.email AS email,
       collect(m.topic) AS topics, collect(m.note) AS notes
LIMIT $limit
"""

# =============================================================================
# Recommendations
# =============================================================================

CO_PURCHASE_ITEMS = """
MATCH (u:User {email: $email})-[:BOUGHT]->(:Item)<-[:BOUGHT]-(other:User)-[:BOUGHT]->(rec:Item)
WHERE other <> u AND NOT (u)-[:BOUGHT]->(rec)
RETURN DISTINCT rec.name AS recommendation
LIMIT $limit
"""

POPULAR_ITEMS = """
MATCH (buyer:User)-[:BOUGHT]->(itm:Item)
RETURN itm.name AS recommendation, count(buyer) AS cnt
ORDER BY cnt DESC, recommendation ASC
LIMIT $limit
"""

DEPARTMENT_MENTORS = """
MATCH (u:User {email: $email})
MATCH (f:User {role: 'Faculty'})
WHERE f.dept = u.dept
RETURN DISTINCT f.name AS mentor
LIMIT $limit
"""

RELATED_JOBS = """
MATCH (u:User {email: $email})
MATCH (f:User)-[:POSTED]->(j:Job)
WHERE f.dept = u.dept OR (u)-[:CONNECTED_WITH]-(f)
RETURN DISTINCT j.title AS job
LIMIT $limit
"""

# =============================================================================
# Seed / reset
# =============================================================================

DELETE_EVERYTHING = "MATCH (n) DETACH DELETE n"

SEED_USER = """
MERGE (u:User {email: $email})
SET u.name = $name, u.role = $role, u.dept = $dept, u.password = $password
"""

SEED_ITEM = "MERGE (:Item {name: $name})"

SEED_JOB = """
MATCH (u:User {email: $poster})
CREATE (j:Job {title: $title, desc: $desc, postedAt: datetime()})
CREATE (u)-[:POSTED]->(j)
"""

SEED_SELLS = """
MATCH (u:User {email: $email}), (i:Item {name: $item})
MERGE (u)-[:SELLS]->(i)
"""

SEED_BOUGHT = """
MATCH (u:User {email: $email}), (i:Item {name: $item})
MERGE (u)-[b:BOUGHT]->(i)
SET b.when = datetime(), b.qty = $qty
"""

SEED_CONNECTED = """
MATCH (a:User {email: $email}), (b:User {email: $other})
MERGE (a)-[:CONNECTED_WITH]->(b)
"""
