"""
UIBro Interpreter - Executes UIBro programs against a Toolkit
"""

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

from .ast import (
    ASTNode, Program, Literal, BinaryOp, Call, Chain, Assignment, IfStmt
)
from .errors import Diagnostics, InterpreterStateError, ToolkitError
from .lexer import UI, TokenType
from .toolkit import RecordingToolkit, Toolkit
from .values import (
    Handle, ObjectKind, Value, apply_binary, apply_unary, parse_number,
    to_bool, to_int, to_string
)

logger = logging.getLogger(__name__)

ROOTS = UI['roots']
FONT = UI['defaults']['font']
NOTIFICATION_DURATION = UI['defaults']['notificationDuration']

# The notification service is stateless and never enters the registry
NOTIFICATION = Handle(-1, ObjectKind.NOTIFICATION)


class Environment:
    """The single flat variable scope of a script run."""

    def __init__(self):
        self.variables: Dict[str, Value] = {}

    def lookup(self, name: str) -> Optional[Value]:
        return self.variables.get(name)

    def assign(self, name: str, value: Value):
        self.variables[name] = value

    def __contains__(self, name: str) -> bool:
        return name in self.variables


class ObjectRegistry:
    """Arena that keeps every toolkit object alive for the interpreter's lifetime."""

    def __init__(self):
        self._objects: List[Any] = []
        self._kinds: List[ObjectKind] = []

    def add(self, kind: ObjectKind, native: Any) -> Handle:
        self._objects.append(native)
        self._kinds.append(kind)
        return Handle(len(self._objects) - 1, kind)

    def get(self, handle: Handle) -> Any:
        return self._objects[handle.index]

    def find(self, native: Any) -> Optional[Handle]:
        for index, obj in enumerate(self._objects):
            if obj is native:
                return Handle(index, self._kinds[index])
        return None

    def handles(self) -> List[Handle]:
        return [Handle(i, kind) for i, kind in enumerate(self._kinds)]

    def __len__(self) -> int:
        return len(self._objects)

    def __iter__(self) -> Iterator[Any]:
        return iter(self._objects)


class RunState(Enum):
    NOT_STARTED = auto()
    RUNNING = auto()
    FINISHED = auto()


@dataclass(frozen=True)
class Method:
    handler: Callable[..., Optional[Value]]
    params: Tuple[Callable[[Value], Any], ...]
    required: int
    defaults: Tuple[Any, ...] = ()


def setter(operation: str):
    def handler(interp: 'Interpreter', handle: Handle, *params) -> Value:
        getattr(interp.toolkit, operation)(interp.registry.get(handle), *params)
        return Value.object(handle)
    return handler


def adder(kind: ObjectKind):
    def handler(interp: 'Interpreter', handle: Handle, text: str) -> Value:
        native = interp.toolkit.add_control(interp.registry.get(handle), kind, text)
        return Value.object(interp.registry.add(kind, native))
    return handler


def notifier(level: str):
    def handler(interp: 'Interpreter', handle: Handle, title: str, message: str, duration: int = 0) -> None:
        interp.toolkit.notify(title, message, duration, level)
        return None
    return handler


def bold(interp: 'Interpreter', handle: Handle, enable: bool) -> Value:
    weight = FONT['bold'] if enable else FONT['normal']
    interp.toolkit.set_font(interp.registry.get(handle), FONT['size'], weight, FONT['face'])
    return Value.object(handle)


def find_by_id(interp: 'Interpreter', handle: Handle, identifier: str) -> Optional[Value]:
    native = interp.toolkit.find_by_id(interp.registry.get(handle), identifier)
    found = interp.registry.find(native) if native is not None else None
    return Value.object(found) if found is not None else None


def flag(operation: str) -> Method:
    return Method(setter(operation), (to_bool,), 0, (True,))


def text_arg(operation: str) -> Method:
    return Method(setter(operation), (to_string,), 1)


def pair_arg(operation: str) -> Method:
    return Method(setter(operation), (to_int, to_int), 2)


ADDERS = {
    'addLabel': ObjectKind.LABEL,
    'addButton': ObjectKind.BUTTON,
    'addInput': ObjectKind.INPUT,
    'addCheckBox': ObjectKind.CHECKBOX,
    'addComboBox': ObjectKind.COMBOBOX,
    'addProgressBar': ObjectKind.PROGRESSBAR,
    'addGroupBox': ObjectKind.GROUPBOX,
}


def adders(*names: str) -> Dict[str, Method]:
    return {name: Method(adder(ADDERS[name]), (to_string,), 0, ('',)) for name in names}


CONTROL_METHODS = {
    'position': pair_arg('set_position'),
    'size': pair_arg('set_size'),
    'text': text_arg('set_text'),
    'id': text_arg('set_id'),
    'show': flag('set_visible'),
    'enable': flag('set_enabled'),
}

METHODS: Dict[ObjectKind, Dict[str, Method]] = {
    ObjectKind.WINDOW: {
        'title': text_arg('set_title'),
        'size': pair_arg('set_size'),
        'center': flag('center'),
        'findById': Method(find_by_id, (to_string,), 1),
        **adders(*ADDERS),
    },
    ObjectKind.GROUPBOX: {
        **CONTROL_METHODS,
        **adders('addLabel', 'addButton', 'addInput', 'addCheckBox', 'addComboBox', 'addProgressBar'),
    },
    ObjectKind.BUTTON: {
        **CONTROL_METHODS,
        'setDefault': flag('set_default'),
    },
    ObjectKind.LABEL: {
        **CONTROL_METHODS,
        'font': Method(setter('set_font'), (to_int, to_int, to_string), 1, (FONT['normal'], FONT['face'])),
        'bold': Method(bold, (to_bool,), 0, (True,)),
    },
    ObjectKind.INPUT: {
        **CONTROL_METHODS,
        'multiline': flag('set_multiline'),
        'password': flag('set_password'),
        'readonly': flag('set_readonly'),
        'setValue': text_arg('set_text'),
    },
    ObjectKind.CHECKBOX: {
        **CONTROL_METHODS,
        'setChecked': flag('set_checked'),
    },
    ObjectKind.COMBOBOX: {
        **CONTROL_METHODS,
        'addItem': text_arg('add_item'),
        'setSelectedIndex': Method(setter('set_selected_index'), (to_int,), 1),
    },
    ObjectKind.PROGRESSBAR: {
        **CONTROL_METHODS,
        'setRange': pair_arg('set_range'),
        'setValue': Method(setter('set_progress'), (to_int,), 1),
    },
    ObjectKind.NOTIFICATION: {
        'show': Method(notifier('info'), (to_string, to_string, to_int), 2, (NOTIFICATION_DURATION,)),
        'showError': Method(notifier('error'), (to_string, to_string), 2),
        'showWarning': Method(notifier('warning'), (to_string, to_string), 2),
    },
}


class Interpreter:
    def __init__(self, toolkit: Optional[Toolkit] = None, diagnostics: Optional[Diagnostics] = None):
        self.toolkit = toolkit if toolkit is not None else RecordingToolkit()
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics()
        self.env = Environment()
        self.registry = ObjectRegistry()
        self.window: Optional[Handle] = None
        self.state = RunState.NOT_STARTED

    def native(self, handle: Handle) -> Any:
        return self.registry.get(handle)

    def report(self, message: str, line: int = 0):
        self.diagnostics.report('interpreter', message, line)

    def run(self, program: Program) -> Optional[Handle]:
        if self.state != RunState.NOT_STARTED:
            raise InterpreterStateError(f"Interpreter cannot run again (state: {self.state.name.lower()})")
        self.state = RunState.RUNNING
        try:
            for stmt in program.statements:
                self.execute(stmt, self.env)
        finally:
            self.state = RunState.FINISHED
        return self.window

    def execute(self, node: ASTNode, env: Environment):
        if isinstance(node, Assignment):
            if isinstance(node.value, Chain):
                value = self.evaluate_chain(node.value, env)
                if value is None:
                    self.report(f"'{node.name}' left unbound: chain produced no object", node.value.line)
                    return
            else:
                value = self.evaluate(node.value, env)
            env.assign(node.name, value)
        elif isinstance(node, Chain):
            self.evaluate_chain(node, env)
        elif isinstance(node, IfStmt):
            # elseif clauses nest as a lone IfStmt in the else body; walk them iteratively
            while True:
                if to_bool(self.evaluate(node.condition, env)):
                    body = node.then_body
                    break
                if len(node.else_body) == 1 and isinstance(node.else_body[0], IfStmt):
                    node = node.else_body[0]
                    continue
                body = node.else_body
                break
            for stmt in body:
                self.execute(stmt, env)

    def evaluate(self, node: ASTNode, env: Environment) -> Value:
        if isinstance(node, Literal):
            if node.kind == TokenType.NUMBER:
                return Value.number(parse_number(node.value))
            if node.kind == TokenType.BOOLEAN:
                return Value.boolean(node.value == 'true')
            if node.kind == TokenType.IDENTIFIER:
                bound = env.lookup(node.value)
                return bound if bound is not None else Value.string(node.value)
            return Value.string(node.value)
        elif isinstance(node, BinaryOp):
            # Both sides always run, even when the left decides '&&' or '||'
            if node.left is None:
                return apply_unary(node.op, self.evaluate(node.right, env))
            # Fold left-nested operators in a loop, leftmost operand first
            spine = []
            while isinstance(node, BinaryOp) and node.left is not None:
                spine.append(node)
                node = node.left
            value = self.evaluate(node, env)
            for binary in reversed(spine):
                value = apply_binary(binary.op, value, self.evaluate(binary.right, env))
            return value
        elif isinstance(node, Chain):
            value = self.evaluate_chain(node, env)
            return value if value is not None else Value.string('')
        raise TypeError(f"Cannot evaluate {type(node).__name__}")

    def resolve_root(self, name: str, env: Environment) -> Optional[Value]:
        bound = env.lookup(name)
        if bound is not None:
            return bound
        if name == ROOTS['window']:
            return Value.object(self.ensure_window())
        if name == ROOTS['notification']:
            return Value.object(NOTIFICATION)
        return None

    def ensure_window(self) -> Handle:
        if self.window is None:
            self.window = self.registry.add(ObjectKind.WINDOW, self.toolkit.create_window())
            logger.debug("root window created")
        return self.window

    def evaluate_chain(self, chain: Chain, env: Environment) -> Optional[Value]:
        try:
            current = self.resolve_root(chain.root, env)
            if current is None:
                self.report(f"Unknown root '{chain.root}'", chain.line)
            for call in chain.calls:
                args = [self.evaluate(arg, env) for arg in call.args]
                if current is None:
                    self.report(f"Skipped '{call.name}': no object", call.line)
                    continue
                current = self.dispatch(current, call, args)
            return current
        except ToolkitError as exc:
            if exc.line is None:
                exc.line = chain.line
            raise

    def dispatch(self, receiver: Value, call: Call, args: List[Value]) -> Optional[Value]:
        """Run one call; a call that cannot apply leaves the receiver unchanged."""
        if not receiver.is_object:
            self.report(f"Cannot call '{call.name}' on {receiver.kind.name.lower()} value", call.line)
            return receiver
        handle = receiver.data
        method = METHODS[handle.kind].get(call.name)
        if method is None:
            self.report(f"Unknown method '{call.name}' for {handle.kind.name.lower()}", call.line)
            return receiver
        if not method.required <= len(args) <= len(method.params):
            self.report(f"Wrong number of arguments for '{call.name}': {len(args)}", call.line)
            return receiver
        params = [coerce(arg) for coerce, arg in zip(method.params, args)]
        params.extend(method.defaults[len(args) - method.required:])
        return method.handler(self, handle, *params)
