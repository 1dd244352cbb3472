# paratable

`paratable` keeps track of what the validators of a relay chain say about
parachain candidates, and decides which candidates may go into the next block.

Validators are split into groups, one group per parachain. Inside a group,
validators put forward candidates and vote on whether those candidates are
valid. Once enough of the group has vouched for a candidate, and nobody has
called it invalid, the candidate can be included. Every form of cheating the
table can see (two candidates from one validator, a vote both ways, two
signatures on the same statement, a vote from outside the group) is recorded
with its proof.

## What is in the package

| Module | Purpose |
| --- | --- |
| `paratable.statements` | Statements (`CandidateStatement`, `ValidStatement`, `InvalidStatement`), `SignedStatement`, the misbehavior records (`MultipleCandidates`, `UnauthorizedStatement`, `IssuedAndValidity`, `IssuedAndInvalidity`, `ValidityAndInvalidity`, `DoubleSign`), `ValidityAttestation`, `AttestedCandidate` and `Summary` |
| `paratable.candidate` | `CandidateData`: the votes gathered for one candidate and whether it can be included |
| `paratable.table` | `Table`, the statement table itself, and the abstract `Context` it consults |
| `paratable.includable` | `track()`, which watches a set of candidates and finishes once all of them are includable |
| `paratable.dynamic_inclusion` | `DynamicInclusion`: the number of includable candidates needed shrinks as time passes |
| `paratable.proposal` | `ProposalTiming`, which says whether it is time to propose a block, and `current_timestamp()` |
| `paratable.groups` | `make_group_info()`, which builds the validator groups from a duty roster, with `Chain`, `GroupInfo` and `LocalDuty` |
| `paratable.messages` | `OutgoingMessage`, `Extrinsic` and `MessagesFrom` |
| `paratable.adder` | A small example parachain that adds numbers to its state |
| `paratable.adder_collator` | `AdderCollator`, which produces candidates for the adder parachain |

## Installing

Install `paratable` from a source checkout with any tool that understands
`pyproject.toml`. It needs Python 3.10 or later, and `pycryptodome` for
Keccak-256 hashing.

## The statement table

A `Table` needs a `Context`. The context tells it how to get a candidate's
digest and group, who belongs to which group, and how many validity votes a
group needs. Subclass `Context` and implement its four methods:

```python
from paratable.table import Context, Table
from paratable.statements import CandidateStatement, ValidStatement, SignedStatement


class Membership(Context):
    def __init__(self, membership):
        self.membership = membership          # authority -> group

    def candidate_digest(self, candidate):
        return candidate[1]

    def candidate_group(self, candidate):
        return candidate[0]

    def is_member_of(self, authority, group):
        return self.membership.get(authority) == group

    def requisite_votes(self, group):
        members = sum(1 for g in self.membership.values() if g == group)
        return members // 2 + 1


context = Membership({1: 2, 2: 2, 3: 2})
table = Table()

table.import_statement(
    context,
    SignedStatement(statement=CandidateStatement((2, 100)), signature=1, sender=1),
)
summary = table.import_statement(
    context,
    SignedStatement(statement=ValidStatement(100), signature=2, sender=2),
)

print(summary.validity_votes)                    # 2
print(table.candidate_includable(100, context))  # True
print(table.proposed_candidates(context))        # one AttestedCandidate for group 2
```

Issuing a candidate counts as an implicit validity vote from its issuer.

`import_statement` returns a `Summary` when a statement changed the table and
`None` when it was a duplicate, referred to an unknown candidate, or was
misbehavior. Misbehavior is kept per sender in `table.misbehavior()`, a
read-only mapping; only the latest offence of each sender is kept.

`proposed_candidates` returns at most one candidate per group, the lowest
includable one, ordered by group id. `includable_count()` tells how many groups
currently have an includable candidate, and `get_candidate(digest)` looks a
candidate up.

Signatures are not checked by the table: statements are expected to have been
verified before they are imported.

## Validator groups

`make_group_info(validator_duty, authorities, local_id)` takes one duty per
authority (`Chain.relay()` or `Chain.parachain(para_id)`) and returns a mapping
from parachain id to `GroupInfo` together with the local validator's
`LocalDuty`. A group needs validity votes from half of its members, rounded
up. It raises `InvalidDutyRosterLength` when the roster and the authority list
differ in length and `NotValidator` when `local_id` is not an authority; both
derive from `ValidationError`.

## Waiting for candidates to become includable

`track()` takes `(digest, includable)` pairs, later pairs overriding earlier
ones, and returns a sender and an `Includable`. Feed changes to the sender with
`update_candidate`, which returns `True` once everything is includable; the
`Includable` is `done()` from then on, and `wait(timeout)` blocks until then or
until the timeout runs out.

## Inclusion over time

`DynamicInclusion(initial, start, allow_empty)` starts out wanting `initial`
includable candidates and lowers that demand linearly until, after
`allow_empty` has passed, an empty block is acceptable. Instants are
`datetime` values and durations `timedelta` values.
`acceptable_in(now, included)` returns `None` when `included` candidates are
already enough, or the moment from which they will be; it raises `ValueError`
when `now` is before `start`.

`ProposalTiming(dynamic_inclusion, initial_included, now, minimum=None)`
combines that with an optional earliest time and answers
`ready(included, now)`.

## The adder parachain

`paratable.adder` is a parachain whose state is a single 64-bit number.
`HeadData`, `BlockData` and `AddMessage` encode and decode in a fixed-width
little-endian layout, `execute()` applies a block to a parent head, and
`validate_block()` checks an encoded block against an encoded parent head and
returns the encoded new head, raising `ValueError` on malformed input and
`StateMismatch` when the block starts from the wrong state. Messages that
cannot be decoded are ignored, and additions wrap at 2**64.

```python
from paratable.adder import HeadData, BlockData, hash_state, execute

parent = HeadData(number=0, parent_hash=bytes(32), post_state=hash_state(0))
head = execute(parent.hash(), parent, BlockData(state=0, add=5), 0)
print(head.number)                       # 1
print(head.post_state == hash_state(5))  # True
```

`AdderCollator.produce_candidate(last_head, ingress)` builds the next block on
top of an encoded head it made itself (or the genesis head) and remembers every
block it made; it raises `InvalidHead` for undecodable heads.
`genesis_description()` shows the genesis head in decimal and hexadecimal form.

## What the package does not do

`paratable` is a library of the bookkeeping a validator does. It does not run
a node, talk to peers over a network, sign or verify statements, fetch or store
block data, or build blocks, and it has no command-line program.

## Running the tests

The tests use pytest and live in `tests/`; install the `test` extra to get it
and run `pytest`.