"""Tests for module and injector lowering."""

import pytest

from defgen.descriptors import (
    InjectorDescriptor, InvariantViolation, ModuleDescriptor, Reference,
)
from defgen.ir.identifiers import RuntimeConfig, jit_mode_guard
from defgen.ir.nodes import (
    NONE_TYPE, IRArray, IRCall, IRDeferred, IRExpressionType, IRExprStmt,
    IRExternalRef, IRGuardedCall, IRIsolatedSideEffect, IRLiteral, IRObject,
    IRRawExpr, IRTypeof, IRVar,
)
from defgen.lower import (
    DefinitionMap, DuplicateKeyError, build_scope_registration, lower_injector,
    lower_module, refs_to_array, tuple_type_of,
)
from defgen.lower.definition_map import INJECTOR_DEF_KEYS, MODULE_DEF_KEYS


def ref(name: str) -> Reference:
    return Reference(value=IRVar(name), type=IRVar(f"{name}Type"))


def module(**overrides) -> ModuleDescriptor:
    fields = dict(
        type=ref("AppModule"),
        internal_type=IRVar("AppModuleInternal"),
        adjacent_type=IRVar("AppModuleAdjacent"),
    )
    fields.update(overrides)
    return ModuleDescriptor(**fields)


def definition_object(result) -> IRObject:
    assert isinstance(result.expression, IRCall)
    (obj,) = result.expression.args
    return obj


def keys_of(result) -> list[str]:
    return [k for k, _ in definition_object(result).entries]


def field_of(result, key: str):
    return dict(definition_object(result).entries)[key]


# --- DefinitionMap ---

class TestDefinitionMap:
    def test_insertion_order_preserved(self):
        m = DefinitionMap(MODULE_DEF_KEYS)
        m.set("id", IRVar("x"))
        m.set("type", IRVar("T"))
        assert [k for k, _ in m.to_literal_object().entries] == ["id", "type"]

    def test_duplicate_key_fails(self):
        m = DefinitionMap(MODULE_DEF_KEYS)
        m.set("type", IRVar("T"))
        with pytest.raises(DuplicateKeyError) as exc:
            m.set("type", IRVar("U"))
        assert exc.value.key == "type"

    def test_duplicate_key_is_invariant_violation(self):
        m = DefinitionMap(INJECTOR_DEF_KEYS)
        m.set("imports", IRArray())
        with pytest.raises(InvariantViolation):
            m.set("imports", IRArray())

    def test_unknown_key_rejected(self):
        m = DefinitionMap(INJECTOR_DEF_KEYS)
        with pytest.raises(InvariantViolation):
            m.set("declarations", IRArray())

    def test_non_expression_rejected(self):
        m = DefinitionMap(MODULE_DEF_KEYS)
        with pytest.raises(InvariantViolation):
            m.set("type", "AppModule")

    def test_empty_map_serializes_to_empty_object(self):
        m = DefinitionMap(INJECTOR_DEF_KEYS)
        assert m.to_literal_object() == IRObject(entries=[])
        assert len(m) == 0

    def test_contains(self):
        m = DefinitionMap(MODULE_DEF_KEYS)
        m.set("type", IRVar("T"))
        assert "type" in m
        assert "id" not in m


# --- Reference arrays and tuple types ---

class TestRefsToArray:
    def test_eager_array(self):
        out = refs_to_array([ref("A"), ref("B")], forward_declare=False)
        assert out == IRArray(entries=[IRVar("A"), IRVar("B")])

    def test_forward_declared_array_is_deferred(self):
        out = refs_to_array([ref("A"), ref("B")], forward_declare=True)
        assert isinstance(out, IRDeferred)
        assert out.expr == refs_to_array([ref("A"), ref("B")], forward_declare=False)

    def test_order_follows_input(self):
        refs = [ref("A"), ref("B"), ref("C")]
        forward = refs_to_array(refs, False)
        backward = refs_to_array(list(reversed(refs)), False)
        assert [v.name for v in forward.entries] == ["A", "B", "C"]
        assert [v.name for v in backward.entries] == ["C", "B", "A"]

    def test_empty_list_rejected(self):
        with pytest.raises(InvariantViolation):
            refs_to_array([], forward_declare=False)


class TestTupleTypeOf:
    def test_empty_is_none_type(self):
        assert tuple_type_of([]) is NONE_TYPE

    def test_typeof_each_type_in_order(self):
        out = tuple_type_of([ref("A"), ref("B")])
        assert isinstance(out, IRExpressionType)
        assert out.expr == IRArray(entries=[
            IRTypeof(IRVar("AType")), IRTypeof(IRVar("BType")),
        ])

    def test_uses_type_not_value(self):
        out = tuple_type_of([Reference(value=IRVar("v"), type=IRVar("t"))])
        assert out.expr.entries == [IRTypeof(IRVar("t"))]


# --- Module lowering ---

class TestModuleLowering:
    def test_minimal_module_has_only_type(self):
        result = lower_module(module())
        assert keys_of(result) == ["type"]
        assert field_of(result, "type") == IRVar("AppModuleInternal")
        assert result.statements == []

    def test_empty_schemas_omitted(self):
        result = lower_module(module(schemas=[]))
        assert keys_of(result) == ["type"]

    def test_define_call_is_pure(self):
        result = lower_module(module())
        assert result.expression.pure
        assert result.expression.callee == IRExternalRef("@defgen/core", "ɵɵdefineModule")

    def test_full_field_order_inline(self):
        result = lower_module(module(
            bootstrap=[ref("Boot")],
            declarations=[ref("Decl")],
            imports=[ref("Imp")],
            exports=[ref("Exp")],
            schemas=[ref("SCHEMA")],
            id=IRLiteral("app"),
            emit_inline=True,
        ))
        assert keys_of(result) == [
            "type", "bootstrap", "declarations", "imports", "exports", "schemas", "id",
        ]
        assert result.statements == []

    def test_field_order_split(self):
        result = lower_module(module(
            bootstrap=[ref("Boot")],
            declarations=[ref("Decl")],
            schemas=[ref("SCHEMA")],
            id=IRLiteral("app"),
        ))
        assert keys_of(result) == ["type", "bootstrap", "schemas", "id"]
        assert len(result.statements) == 1

    def test_inline_declarations(self):
        result = lower_module(module(declarations=[ref("X")], emit_inline=True))
        assert keys_of(result) == ["type", "declarations"]
        assert field_of(result, "declarations") == IRArray(entries=[IRVar("X")])
        assert result.statements == []

    def test_split_declarations(self):
        result = lower_module(module(declarations=[ref("X")], emit_inline=False))
        assert keys_of(result) == ["type"]
        assert len(result.statements) == 1
        assert isinstance(result.statements[0], IRIsolatedSideEffect)

    def test_split_with_empty_scope_emits_nothing(self):
        result = lower_module(module(bootstrap=[ref("Boot")], emit_inline=False))
        assert result.statements == []

    def test_inline_skips_empty_lists(self):
        result = lower_module(module(exports=[ref("E")], emit_inline=True))
        assert keys_of(result) == ["type", "exports"]

    def test_forward_decls_defer_bootstrap_and_scope(self):
        result = lower_module(module(
            bootstrap=[ref("Boot")],
            declarations=[ref("Decl")],
            emit_inline=True,
            contains_forward_decls=True,
        ))
        assert isinstance(field_of(result, "bootstrap"), IRDeferred)
        assert isinstance(field_of(result, "declarations"), IRDeferred)

    def test_schemas_never_deferred(self):
        result = lower_module(module(
            schemas=[ref("S1"), ref("S2")],
            contains_forward_decls=True,
        ))
        assert field_of(result, "schemas") == IRArray(entries=[IRVar("S1"), IRVar("S2")])

    def test_id_set_directly(self):
        result = lower_module(module(id=IRRawExpr("'app-id'")))
        assert field_of(result, "id") == IRRawExpr("'app-id'")

    def test_type_carries_full_scope(self):
        desc = module(declarations=[ref("X")], emit_inline=False)
        result = lower_module(desc)
        assert result.type.expr == IRExternalRef("@defgen/core", "ɵɵModuleDefWithMeta")
        module_type, decls, imports, exports = result.type.type_params
        assert module_type == IRExpressionType(expr=IRVar("AppModuleType"))
        assert decls == IRExpressionType(expr=IRArray(entries=[IRTypeof(IRVar("XType"))]))
        assert imports is NONE_TYPE
        assert exports is NONE_TYPE

    def test_type_same_for_inline_and_split(self):
        inline = lower_module(module(declarations=[ref("X")], emit_inline=True))
        split = lower_module(module(declarations=[ref("X")], emit_inline=False))
        assert inline.type == split.type

    def test_runtime_module_from_config(self):
        config = RuntimeConfig(runtime_module="@acme/runtime")
        result = lower_module(module(), config)
        assert result.expression.callee.module == "@acme/runtime"
        assert result.type.expr.module == "@acme/runtime"


class TestScopeRegistration:
    def test_none_when_scope_empty(self):
        assert build_scope_registration(module()) is None

    def test_shape(self):
        stmt = build_scope_registration(module(declarations=[ref("X")]))
        assert isinstance(stmt, IRIsolatedSideEffect)
        assert isinstance(stmt.stmt, IRExprStmt)
        guarded = stmt.stmt.expr
        assert isinstance(guarded, IRGuardedCall)
        assert guarded.condition == jit_mode_guard()
        call = guarded.call
        assert call.callee == IRExternalRef("@defgen/core", "ɵɵsetModuleScope")
        assert not call.pure
        target, scope = call.args
        assert target == IRVar("AppModuleAdjacent")
        assert scope.entries == [("declarations", IRArray(entries=[IRVar("X")]))]

    def test_scope_order(self):
        stmt = build_scope_registration(module(
            exports=[ref("E")], imports=[ref("I")], declarations=[ref("D")],
        ))
        scope = stmt.stmt.expr.call.args[1]
        assert [k for k, _ in scope.entries] == ["declarations", "imports", "exports"]

    def test_forward_declared_scope(self):
        stmt = build_scope_registration(module(
            imports=[ref("I")], contains_forward_decls=True,
        ))
        scope = stmt.stmt.expr.call.args[1]
        assert scope.entries == [("imports", IRDeferred(IRArray(entries=[IRVar("I")])))]

    def test_jit_flag_from_config(self):
        config = RuntimeConfig(jit_flag="ngJitMode")
        stmt = build_scope_registration(module(declarations=[ref("X")]), config)
        assert stmt.stmt.expr.condition.right == IRVar("ngJitMode")


# --- Injector lowering ---

def injector(**overrides) -> InjectorDescriptor:
    fields = dict(
        name="AppModule",
        type=ref("AppModule"),
        internal_type=IRVar("AppModule"),
    )
    fields.update(overrides)
    return InjectorDescriptor(**fields)


class TestInjectorLowering:
    def test_empty_injector(self):
        result = lower_injector(injector())
        assert keys_of(result) == []
        assert result.statements == []

    def test_providers_set_directly(self):
        result = lower_injector(injector(providers=IRRawExpr("[Svc]")))
        assert field_of(result, "providers") == IRRawExpr("[Svc]")

    def test_imports_array(self):
        result = lower_injector(injector(imports=[IRVar("A"), IRVar("B")]))
        assert field_of(result, "imports") == IRArray(entries=[IRVar("A"), IRVar("B")])

    def test_field_order(self):
        result = lower_injector(injector(
            imports=[IRVar("A")], providers=IRRawExpr("[]"),
        ))
        assert keys_of(result) == ["providers", "imports"]

    def test_pure_define_call_and_type(self):
        result = lower_injector(injector())
        assert result.expression.pure
        assert result.expression.callee.name == "ɵɵdefineInjector"
        assert result.type.expr.name == "ɵɵInjectorDef"
        assert result.type.type_params == [IRExpressionType(expr=IRVar("AppModuleType"))]


# --- Descriptor structure ---

class TestDescriptors:
    def test_lists_normalized_to_tuples(self):
        desc = module(declarations=[ref("A")])
        assert desc.declarations == (ref("A"),)

    def test_reference_requires_expressions(self):
        with pytest.raises(InvariantViolation):
            Reference(value="A", type=IRVar("A"))

    def test_module_requires_reference_type(self):
        with pytest.raises(InvariantViolation):
            module(type=IRVar("AppModule"))

    def test_module_rejects_non_reference_entries(self):
        with pytest.raises(InvariantViolation):
            module(declarations=[IRVar("A")])

    def test_injector_requires_name(self):
        with pytest.raises(InvariantViolation):
            injector(name="")

    def test_injector_rejects_non_expression_imports(self):
        with pytest.raises(InvariantViolation):
            injector(imports=["A"])

    def test_missing_required_fields(self):
        with pytest.raises(InvariantViolation, match="Reference.type is required"):
            Reference(value=IRVar("A"))
        with pytest.raises(InvariantViolation, match="ModuleDescriptor.type is required"):
            ModuleDescriptor(internal_type=IRVar("M"), adjacent_type=IRVar("M"))
        with pytest.raises(InvariantViolation, match="adjacent_type is required"):
            ModuleDescriptor(type=ref("M"), internal_type=IRVar("M"))
        with pytest.raises(InvariantViolation, match="InjectorDescriptor.type is required"):
            InjectorDescriptor(name="M", internal_type=IRVar("M"))
        with pytest.raises(InvariantViolation, match="InjectorDescriptor.name is required"):
            InjectorDescriptor(type=ref("M"), internal_type=IRVar("M"))
