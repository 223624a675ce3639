"""convergent - Declarative AWS EC2 resources that wait for eventually-consistent changes to converge."""

from .blueprints import Blueprint as Blueprint
from .config import Timeouts as Timeouts
from .context import Context as Context
from .eip_association import EipAssociation as EipAssociation
from .errors import Cancelled as Cancelled
from .errors import ConvergentError as ConvergentError
from .errors import MalformedLocator as MalformedLocator
from .errors import RefreshError as RefreshError
from .errors import ResourceError as ResourceError
from .errors import ResourceNotFound as ResourceNotFound
from .errors import UnexpectedState as UnexpectedState
from .errors import WaitError as WaitError
from .errors import WaitTimeout as WaitTimeout
from .providers import Provider as Provider
from .snapshot_permission import SnapshotCreateVolumePermission as SnapshotCreateVolumePermission
from .spec import Specification as Specification
from .specop import Absent as Absent
from .specop import Ensure as Ensure
from .specop import Present as Present
from .specop import SpecOp as SpecOp
from .waiter import PollSpec as PollSpec
from .waiter import await_convergence as await_convergence
from .waiter import wait_for_state as wait_for_state
