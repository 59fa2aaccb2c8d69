"""Branch maintenance — opening and closing branches.

Both operations realign every product's stock entries with the new branch
list, so each product keeps exactly one entry per existing branch. Like
the product operations they take the Workspace directly instead of going
through commands and handlers.
"""

import structlog

from inventory.branch.branch import Branch
from inventory.exceptions import InvariantViolation, NotFound
from inventory.product.editing import sync_form_stock

logger = structlog.get_logger(__name__)


def add_branch(workspace, name):
    """Open a branch and give every product a zero entry for it."""
    branch = Branch.create(name)

    workspace.branches.append(branch)
    for product in workspace.products:
        product.reconcile_stock(workspace.branches)
    sync_form_stock(workspace.form, workspace.branches)

    logger.info("Branch added", branch_id=str(branch.id), name=branch.name, products=len(workspace.products))
    return branch


def delete_branch(workspace, branch_id):
    """Close a branch and drop its stock entries from every product.

    The last remaining branch cannot be closed. Cart lines pointing at the
    closed branch are left alone; checkout reports them as unavailable.
    """
    branch = workspace.find_branch(branch_id)
    if branch is None:
        raise NotFound(f"Branch {branch_id} not found", branch_id=branch_id)
    if len(workspace.branches) <= 1:
        logger.warning("Refused to delete the last branch", branch_id=str(branch_id))
        raise InvariantViolation("At least one branch must exist", branch_id=str(branch_id))

    workspace.branches = [b for b in workspace.branches if str(b.id) != str(branch.id)]
    for product in workspace.products:
        product.reconcile_stock(workspace.branches)
    sync_form_stock(workspace.form, workspace.branches)

    dangling = [line for line in workspace.cart.lines if str(line.branch_id) == str(branch.id)]
    if dangling:
        logger.warning(
            "Cart lines reference a deleted branch",
            branch_id=str(branch.id),
            line_count=len(dangling),
        )

    logger.info("Branch deleted", branch_id=str(branch.id), name=branch.name)
    return branch
