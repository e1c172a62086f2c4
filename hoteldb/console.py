#!/usr/bin/env python3

import logging

from . import workflows
from .db import Error
from .fields import IntField


_logger = logging.getLogger(__name__)


GREETING = """
*******************************************************
              Hotel Management Console
*******************************************************
"""

# (label, workflow), the menu number is the position starting at 1.
MENU = (
    ("Add new customer", workflows.add_customer),
    ("Add new room", workflows.add_room),
    ("Add new maintenance company", workflows.add_maintenance_company),
    ("Add new repair", workflows.add_repair),
    ("Add new booking", workflows.book_room),
    ("Assign house cleaning staff to a room", workflows.assign_house_cleaning_to_room),
    ("Raise a repair request", workflows.repair_request),
    ("List available rooms of a hotel", workflows.available_rooms),
    ("Get number of booked rooms", workflows.booked_rooms),
    ("List rooms available for a week", workflows.week_availability),
    ("Get top k rooms with highest price for a date range", workflows.top_k_price_by_date_range),
    ("Get top k highest booking price for a customer", workflows.top_k_price_for_customer),
    ("Get customer total cost occurred for a given date range", workflows.total_cost_for_customer),
    ("List the repairs made by maintenance company", workflows.repairs_by_company),
    ("Get top k maintenance companies based on repair count", workflows.top_k_companies_by_repair_count),
    ("Get number of repairs occurred per year for a given hotel room", workflows.repairs_per_year),
)


class Console:
    """
    Menu loop. Each choice runs one workflow then the menu is displayed
    again until the exit choice is read.
    """

    choice_field = IntField()

    def __init__(self, session, menu=MENU):
        self.session = session
        self.menu = menu
        self.exit_choice = len(menu) + 1

    def display_menu(self):
        self.session.print("MAIN MENU")
        self.session.print("---------")
        for number, (label, _) in enumerate(self.menu, 1):
            self.session.print("{}. {}".format(number, label))
        self.session.print("{}. < EXIT".format(self.exit_choice))

    def read_choice(self):
        return self.session.prompt("Please make your choice: ", self.choice_field)

    def run_workflow(self, workflow):
        """
        Run workflow, an error of the database abandons the workflow.

        Return True if the workflow succeeded.
        """
        try:
            workflow(self.session)
        except Error as error:
            _logger.debug("%s abandoned", workflow.__name__, exc_info=True)
            self.session.error("Error: {}".format(error.args[0]))
            return False
        return True

    def run(self):
        self.session.print(GREETING)
        while True:
            self.display_menu()
            choice = self.read_choice()
            if choice == self.exit_choice:
                break
            if 1 <= choice <= len(self.menu):
                self.run_workflow(self.menu[choice - 1][1])
            else:
                self.session.print("Unrecognized choice!")
