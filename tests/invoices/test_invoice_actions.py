import datetime
from unittest import IsolatedAsyncioTestCase

import asyncpg
from fastapi import HTTPException

from invoices import actions
from invoices.actions import ActionContext
from invoices.schemas import State

TODAY = datetime.date(2024, 3, 14)
VALID_FORM = {"customerId": "cust-1", "amount": "19.99", "status": "pending"}


class Navigated(Exception):
    def __init__(self, location):
        super().__init__(location)
        self.location = location


class FakeStore:
    '''Records repository calls in the shared event log'''
    def __init__(self, events, fail=None):
        self.events = events
        self.fail = fail
        self.calls = []

    async def _record(self, name, *args, **kwargs):
        self.events.append(name)
        self.calls.append((name, args, kwargs))
        if self.fail is not None:
            raise self.fail

    async def insert_invoice(self, **kwargs):
        await self._record("insert", **kwargs)

    async def update_invoice(self, invoice_id, **kwargs):
        await self._record("update", invoice_id, **kwargs)

    async def delete_invoice(self, invoice_id):
        await self._record("delete", invoice_id)


class TestInvoiceActions(IsolatedAsyncioTestCase):
    def setUp(self):
        self.events = []
        self.revalidated = []
        self.store = FakeStore(self.events)

    def make_ctx(self, **kwargs):
        def revalidate(path):
            self.events.append("revalidate")
            self.revalidated.append(path)

        def redirect(location):
            self.events.append("redirect")
            raise Navigated(location)

        options = dict(
            store=self.store,
            revalidate_path=revalidate,
            redirect=redirect,
            today=lambda: TODAY,
            catch_create_errors=True,
            invoices_path="/dashboard/invoices",
        )
        options.update(kwargs)
        return ActionContext(**options)

    async def test_create_invoice(self):
        with self.assertRaises(Navigated) as ctx:
            await actions.create_invoice(VALID_FORM, ctx=self.make_ctx())
        self.assertEqual(ctx.exception.location, "/dashboard/invoices")
        self.assertEqual(self.events, ["insert", "revalidate", "redirect"])
        self.assertEqual(self.store.calls, [
            ("insert", (), {
                "customer_id": "cust-1", "amount": 1999,
                "status": "pending", "date": TODAY
            })
        ])
        self.assertEqual(self.revalidated, ["/dashboard/invoices"])

    async def test_create_ignores_previous_state(self):
        with self.assertRaises(Navigated):
            await actions.create_invoice(
                VALID_FORM, State(message="old"), ctx=self.make_ctx())
        self.assertEqual(len(self.store.calls), 1)

    async def test_create_invalid_amount(self):
        for amount in ("0", "-10"):
            state = await actions.create_invoice(
                {**VALID_FORM, "amount": amount}, ctx=self.make_ctx())
            self.assertEqual(state.message, "Missing Fields. Failed to Create Invoice.")
            self.assertIn("amount", state.errors)
        self.assertEqual(self.events, [])

    async def test_create_invalid_status(self):
        state = await actions.create_invoice(
            {**VALID_FORM, "status": "overdue"}, ctx=self.make_ctx())
        self.assertEqual(list(state.errors), ["status"])
        self.assertEqual(self.events, [])

    async def test_create_database_error(self):
        self.store.fail = RuntimeError("connection refused")
        with self.assertLogs("invoices.actions", level="ERROR"):
            state = await actions.create_invoice(VALID_FORM, ctx=self.make_ctx())
        self.assertEqual(state.message, "Database Error: Failed to Create Invoice.")
        self.assertEqual(state.errors, {})
        self.assertEqual(self.events, ["insert"])

    async def test_create_database_error_propagates(self):
        self.store.fail = RuntimeError("connection refused")
        with self.assertRaises(RuntimeError):
            await actions.create_invoice(
                VALID_FORM, ctx=self.make_ctx(catch_create_errors=False))
        self.assertEqual(self.events, ["insert"])

    async def test_update_invoice(self):
        with self.assertRaises(Navigated):
            await actions.update_invoice(
                "inv-1", {**VALID_FORM, "amount": "250", "status": "paid"},
                ctx=self.make_ctx())
        self.assertEqual(self.events, ["update", "revalidate", "redirect"])
        name, args, kwargs = self.store.calls[0]
        self.assertEqual(args, ("inv-1",))
        self.assertEqual(kwargs, {"customer_id": "cust-1", "amount": 25000, "status": "paid"})
        self.assertNotIn("date", kwargs)
        self.assertNotIn("id", kwargs)

    async def test_update_invalid(self):
        state = await actions.update_invoice(
            "inv-1", {**VALID_FORM, "customerId": ""}, ctx=self.make_ctx())
        self.assertEqual(state.message, "Missing Fields. Failed to Update Invoice.")
        self.assertEqual(list(state.errors), ["customerId"])
        self.assertEqual(self.events, [])

    async def test_update_database_error(self):
        self.store.fail = OSError("timeout")
        with self.assertLogs("invoices.actions", level="ERROR"):
            state = await actions.update_invoice("inv-1", VALID_FORM, ctx=self.make_ctx())
        self.assertEqual(state.message, "Database Error: Failed to Update Invoice.")
        self.assertEqual(self.events, ["update"])

    async def test_delete_invoice(self):
        state = await actions.delete_invoice("inv-1", ctx=self.make_ctx())
        self.assertTrue(state.ok)
        self.assertEqual(self.events, ["delete", "revalidate"])
        self.assertEqual(self.store.calls, [("delete", ("inv-1",), {})])

    async def test_delete_database_error(self):
        self.store.fail = RuntimeError("boom")
        with self.assertLogs("invoices.actions", level="ERROR"):
            state = await actions.delete_invoice("inv-1", ctx=self.make_ctx())
        self.assertFalse(state.ok)
        self.assertEqual(state.message, "Database Error: Failed to Delete Invoice.")
        self.assertEqual(self.events, ["delete"])

    async def test_programming_errors_are_not_reported_as_database_errors(self):
        self.store.fail = TypeError("unexpected keyword argument")
        with self.assertRaises(TypeError):
            await actions.create_invoice(VALID_FORM, ctx=self.make_ctx())
        with self.assertRaises(TypeError):
            await actions.update_invoice("inv-1", VALID_FORM, ctx=self.make_ctx())
        with self.assertRaises(TypeError):
            await actions.delete_invoice("inv-1", ctx=self.make_ctx())
        self.assertEqual(self.revalidated, [])

    async def test_connection_errors_are_reported(self):
        self.store.fail = asyncpg.InterfaceError("connection is closed")
        with self.assertLogs("invoices.actions", level="ERROR"):
            state = await actions.delete_invoice("inv-1", ctx=self.make_ctx())
        self.assertEqual(state.message, "Database Error: Failed to Delete Invoice.")

    def test_redirect_raises_see_other(self):
        with self.assertRaises(HTTPException) as ctx:
            actions.redirect("/dashboard/invoices")
        self.assertEqual(ctx.exception.status_code, 303)
        self.assertEqual(ctx.exception.headers["Location"], "/dashboard/invoices")
