"""
Property test: after any sequence of creates, updates, deletes and bulk
deletes, every stored balance equals its opening balance plus the signed
sum of the transactions that still exist on it.
"""

from dataclasses import replace
from decimal import Decimal

from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st
from sqlalchemy import select

from ledger_kernel.db.types import round_money
from ledger_kernel.domain.deltas import signed_delta
from ledger_kernel.models.account import Account
from ledger_kernel.models.transaction import TransactionType

amounts = st.decimals(
    min_value=Decimal("0.01"), max_value=Decimal("10000"), places=2,
    allow_nan=False, allow_infinity=False,
)
types = st.sampled_from([TransactionType.INCOME, TransactionType.EXPENSE])
targets = st.integers(min_value=0, max_value=1)
picks = st.integers(min_value=0, max_value=50)

steps = st.one_of(
    st.tuples(st.just("create"), types, amounts, targets),
    st.tuples(st.just("update"), picks, types, amounts, targets),
    st.tuples(st.just("delete"), picks),
    st.tuples(st.just("bulk"), st.lists(picks, max_size=4)),
)


def _stored_balance(session, account_id) -> Decimal:
    return round_money(
        session.execute(select(Account.balance).where(Account.id == account_id)).scalar_one()
    )


@settings(
    max_examples=25,
    deadline=None,
    suppress_health_check=[HealthCheck.function_scoped_fixture],
)
@given(
    openings=st.tuples(amounts, amounts),
    sequence=st.lists(steps, max_size=12),
)
def test_balances_reconcile_with_live_transactions(
    session, make_user, make_account, tx_input, mutator, bulk_deleter,
    openings, sequence,
):
    user = make_user()
    accounts = [
        make_account(user, balance=openings[0], name="A"),
        make_account(user, balance=openings[1], name="B"),
    ]
    # transaction id -> (account index, signed effect)
    live: dict = {}

    for step in sequence:
        kind = step[0]
        if kind == "create":
            _, tx_type, amount, target = step
            row = mutator.create(
                user.id, tx_input(accounts[target], transaction_type=tx_type, amount=amount)
            )
            live[row.id] = (target, signed_delta(tx_type, amount))
        elif kind == "update" and live:
            _, pick, tx_type, amount, target = step
            tx_id = sorted(live, key=str)[pick % len(live)]
            data = tx_input(accounts[target], transaction_type=tx_type, amount=amount)
            mutator.update(user.id, tx_id, replace(data, category="moved"))
            live[tx_id] = (target, signed_delta(tx_type, amount))
        elif kind == "delete" and live:
            tx_id = sorted(live, key=str)[step[1] % len(live)]
            mutator.delete(user.id, tx_id)
            del live[tx_id]
        elif kind == "bulk" and live:
            ordered = sorted(live, key=str)
            chosen = {ordered[p % len(ordered)] for p in step[1]}
            result = bulk_deleter.delete_many(user.id, chosen)
            assert set(result.deleted_ids) == chosen
            for tx_id in chosen:
                del live[tx_id]

    for index, account in enumerate(accounts):
        expected = openings[index] + sum(
            (effect for target, effect in live.values() if target == index), Decimal("0")
        )
        assert _stored_balance(session, account.id) == round_money(expected)
