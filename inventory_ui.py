#!/usr/bin/env python3
# inventory_ui.py

import tkinter as tk
from tkinter import ttk, messagebox, filedialog, colorchooser
from matplotlib.backends.backend_tkagg import FigureCanvasTkAgg

from chart import BASE_DPI, DEFAULT_CHART_SIZE, ChartRenderer, MatplotlibSurface, export_chart
from editor import FieldEdit, InventoryEditor
from inventory import DEFAULT_COLOR, Field, price_text
from scheduler import Debouncer, RenderScheduler, TkTimers
from storage import DATA_FILE, InventoryStorage, JsonFileStore, load_or_seed

# Constants
MESSAGE_MS = 2600
FONT_FAMILY = "Helvetica"
BG_COLOR = '#f0f8f0'
FG_COLOR = '#2d5016'
DELETE_COLOR = '#dc2626'


# --------------------------------------------------------------------- #
#   Embedded chart surface
# --------------------------------------------------------------------- #
class EmbeddedChartSurface(MatplotlibSurface):
    """Matplotlib chart surface shown inside the window via FigureCanvasTkAgg."""

    def __init__(self, parent):
        super().__init__()
        self.figure.set_facecolor('white')
        self.canvas = FigureCanvasTkAgg(self.figure, parent)
        self.widget = self.canvas.get_tk_widget()

    def pixel_ratio(self) -> float:
        try:
            return self.widget.winfo_fpixels('1i') / BASE_DPI
        except tk.TclError:
            return 1.0

    def size(self):
        # FigureCanvasTkAgg keeps the figure sized to the widget
        ratio = self.pixel_ratio() or 1.0
        width, height = self.figure.get_size_inches() * self.figure.dpi
        if width <= 1 or height <= 1:
            return DEFAULT_CHART_SIZE, DEFAULT_CHART_SIZE
        return width / ratio, height / ratio

    def draw(self) -> None:
        self.canvas.draw_idle()


# --------------------------------------------------------------------- #
#   Editable row cell
# --------------------------------------------------------------------- #
class RowCell:
    """
    One editable field of one row, bound to a Tk variable.

    Every write to the variable is sent as a live edit; ``commit()`` sends
    the committed edit and writes the stored value back, so a price typed
    as "abc" shows "0".
    """

    def __init__(self, editor, item_id, field, var):
        self.editor = editor
        self.item_id = item_id
        self.field = field
        self.var = var
        self._syncing = False
        var.trace_add('write', self.on_live)

    def on_live(self, *_):
        if not self._syncing:
            self.editor.edit_field(FieldEdit(self.item_id, self.field, self.var.get(), live=True))

    def commit(self, _event=None):
        shown = self.editor.edit_field(FieldEdit(self.item_id, self.field, self.var.get()))
        if shown is not None and shown != self.var.get():
            self._syncing = True
            try:
                self.var.set(shown)
            finally:
                self._syncing = False
        return shown


# --------------------------------------------------------------------- #
#   GUI Application
# --------------------------------------------------------------------- #
class CarInventoryApp:
    def __init__(self, master, data_file: str = DATA_FILE):
        self.master = master
        self.master.title("Car Inventory")
        self.master.geometry("1200x760")
        self.master.configure(bg=BG_COLOR)
        self.master.report_callback_exception = self._report_error

        self.timers = TkTimers(self.master)
        self.storage = InventoryStorage(JsonFileStore(data_file))
        self.inventory = load_or_seed(self.storage)

        self._configure_styles()
        self._create_menu()
        self._create_status_bar()

        main_container = ttk.Frame(self.master, style='Green.TFrame')
        main_container.pack(fill='both', expand=True, padx=15, pady=15)
        main_container.columnconfigure(0, weight=3)
        main_container.columnconfigure(1, weight=2)
        main_container.rowconfigure(0, weight=1)

        left = ttk.Frame(main_container, style='Green.TFrame')
        left.grid(row=0, column=0, sticky='nsew', padx=(0, 10))
        self._create_rows_panel(left)
        self._create_add_form(left)
        self._create_chart_panel(main_container)

        self.renderer = ChartRenderer(self.chart_surface, panel=self)
        self.render_scheduler = RenderScheduler(self.timers, self.render_chart)
        self.editor = InventoryEditor(self.inventory, self.storage, self.render_scheduler,
                                      self.timers, view=self)
        self._hide_message_later = Debouncer(self.timers, self._hide_message, MESSAGE_MS)

        self.master.protocol("WM_DELETE_WINDOW", self._on_close)
        self.refresh_rows()
        self.render_scheduler.request()

    def _configure_styles(self):
        """Configure custom styles"""
        style = ttk.Style()
        style.configure('Green.TFrame', background=BG_COLOR)
        style.configure('Title.TLabel',
                        background=BG_COLOR,
                        foreground=FG_COLOR,
                        font=(FONT_FAMILY, 14, 'bold'))
        style.configure('Green.TLabel',
                        background=BG_COLOR,
                        foreground=FG_COLOR,
                        font=(FONT_FAMILY, 10))
        style.configure('Header.TLabel', font=(FONT_FAMILY, 10, 'bold'))
        style.configure('Total.TLabel', font=(FONT_FAMILY, 16, 'bold'), foreground=FG_COLOR)
        style.configure('Notice.TLabel', font=(FONT_FAMILY, 11), foreground='#b91c1c')

    def _create_menu(self):
        """Create application menu"""
        menubar = tk.Menu(self.master)
        self.master.config(menu=menubar)

        file_menu = tk.Menu(menubar, tearoff=0)
        menubar.add_cascade(label="File", menu=file_menu)
        file_menu.add_command(label="Export Chart...", command=self._export_chart)
        file_menu.add_separator()
        file_menu.add_command(label="Exit", command=self._on_close)

        view_menu = tk.Menu(menubar, tearoff=0)
        menubar.add_cascade(label="View", menu=view_menu)
        view_menu.add_command(label="Redraw Chart", command=lambda: self.render_scheduler.request())

    def _create_status_bar(self):
        self.message_var = tk.StringVar()
        self.message_label = ttk.Label(self.master, textvariable=self.message_var,
                                       relief=tk.SUNKEN, anchor=tk.W, style='Notice.TLabel')
        self.message_label.pack(side=tk.BOTTOM, fill=tk.X)

    def _create_rows_panel(self, parent):
        """Editable table of cars"""
        list_frame = ttk.LabelFrame(parent, text=" Inventory ", padding=10)
        list_frame.pack(fill='both', expand=True, pady=(0, 10))

        self.rows_frame = ttk.Frame(list_frame)
        self.rows_frame.pack(fill='x', anchor='n')
        for col, weight in enumerate((3, 3, 2, 0, 0)):
            self.rows_frame.columnconfigure(col, weight=weight)

    def _create_add_form(self, parent):
        """Add-car form"""
        form_frame = ttk.LabelFrame(parent, text=" Add Car ", padding=15)
        form_frame.pack(fill='x')

        ttk.Label(form_frame, text="Manufacturer:").grid(row=0, column=0, sticky='w', padx=(0, 5))
        self.manufacturer_entry = ttk.Entry(form_frame, width=18)
        self.manufacturer_entry.grid(row=0, column=1, sticky='ew', padx=(0, 10))

        ttk.Label(form_frame, text="Model:").grid(row=0, column=2, sticky='w', padx=(0, 5))
        self.model_entry = ttk.Entry(form_frame, width=18)
        self.model_entry.grid(row=0, column=3, sticky='ew', padx=(0, 10))

        ttk.Label(form_frame, text="Price:").grid(row=1, column=0, sticky='w', padx=(0, 5), pady=(10, 0))
        self.price_entry = ttk.Entry(form_frame, width=12)
        self.price_entry.grid(row=1, column=1, sticky='w', padx=(0, 10), pady=(10, 0))

        ttk.Label(form_frame, text="Color:").grid(row=1, column=2, sticky='w', padx=(0, 5), pady=(10, 0))
        self.add_color = tk.StringVar(value=DEFAULT_COLOR)
        self.add_color_button = tk.Button(form_frame, width=4, bg=DEFAULT_COLOR,
                                          activebackground=DEFAULT_COLOR, cursor="hand2",
                                          command=self._pick_add_color)
        self.add_color_button.grid(row=1, column=3, sticky='w', pady=(10, 0))

        ttk.Button(form_frame, text="➕ Add", command=self._submit_add).grid(
            row=1, column=4, sticky='e', padx=(20, 0), pady=(10, 0))

        for entry in (self.manufacturer_entry, self.model_entry, self.price_entry):
            entry.bind('<Return>', lambda e: self._submit_add())
        form_frame.columnconfigure(1, weight=1)
        form_frame.columnconfigure(3, weight=1)

    def _create_chart_panel(self, parent):
        """Pie chart, legend and total"""
        chart_frame = ttk.LabelFrame(parent, text=" Price Distribution ", padding=10)
        chart_frame.grid(row=0, column=1, sticky='nsew')

        self.notice_var = tk.StringVar()
        self.notice_label = ttk.Label(chart_frame, textvariable=self.notice_var, style='Notice.TLabel')

        self.chart_surface = EmbeddedChartSurface(chart_frame)
        self.chart_surface.widget.pack(fill='both', expand=True)
        self.chart_surface.canvas.mpl_connect('resize_event', lambda e: self.render_scheduler.request())

        self.legend_frame = ttk.Frame(chart_frame)
        self.legend_frame.pack(fill='x', pady=(10, 0))

        total_row = ttk.Frame(chart_frame)
        total_row.pack(fill='x', pady=(10, 0))
        ttk.Label(total_row, text="Total value:", style='Header.TLabel').pack(side='left')
        self.total_var = tk.StringVar()
        ttk.Label(total_row, textvariable=self.total_var, style='Total.TLabel').pack(side='left', padx=(8, 0))

    # Row list
    def refresh_rows(self):
        """Rebuild one editable row per car"""
        for widget in self.rows_frame.winfo_children():
            widget.destroy()
        self.row_cells = {}

        headers = ("Manufacturer", "Model", "Price", "Color", "")
        for col, text in enumerate(headers):
            ttk.Label(self.rows_frame, text=text, style='Header.TLabel').grid(
                row=0, column=col, sticky='w', padx=4, pady=(0, 6))

        for row, item in enumerate(self.inventory, start=1):
            self._add_text_cell(row, 0, item.id, Field.MANUFACTURER, item.manufacturer)
            self._add_text_cell(row, 1, item.id, Field.MODEL, item.model)
            self._add_text_cell(row, 2, item.id, Field.PRICE, price_text(item.price))

            swatch = tk.Button(self.rows_frame, width=3, bg=item.color, activebackground=item.color,
                               cursor="hand2")
            swatch.configure(command=lambda i=item.id, b=swatch: self._pick_row_color(i, b))
            swatch.grid(row=row, column=3, padx=4, pady=2)

            tk.Button(self.rows_frame, text="🗑", bg=DELETE_COLOR, fg="white",
                      activebackground=DELETE_COLOR, activeforeground="white", cursor="hand2",
                      command=lambda i=item.id: self.editor.delete_item(i)).grid(
                row=row, column=4, padx=4, pady=2)

    def _add_text_cell(self, row, column, item_id, field, value):
        var = tk.StringVar(value=value)
        entry = ttk.Entry(self.rows_frame, textvariable=var, width=14)
        entry.grid(row=row, column=column, sticky='ew', padx=4, pady=2)
        cell = RowCell(self.editor, item_id, field, var)
        entry.bind('<FocusOut>', cell.commit)
        entry.bind('<Return>', cell.commit)
        self.row_cells[(item_id, field)] = cell

    def _pick_row_color(self, item_id, button):
        item = self.inventory.get_item(item_id)
        if item is None:
            return
        _, chosen = colorchooser.askcolor(color=item.color, parent=self.master)
        if not chosen:
            return
        shown = self.editor.edit_field(FieldEdit(item_id, Field.COLOR, chosen))
        if shown is not None:
            button.configure(bg=shown, activebackground=shown)

    # Add form
    def _pick_add_color(self):
        _, chosen = colorchooser.askcolor(color=self.add_color.get(), parent=self.master)
        if chosen:
            self._set_add_color(chosen)

    def _set_add_color(self, color):
        self.add_color.set(color)
        self.add_color_button.configure(bg=color, activebackground=color)

    def _submit_add(self):
        self.editor.add_item(
            self.manufacturer_entry.get(),
            self.model_entry.get(),
            self.price_entry.get(),
            self.add_color.get(),
        )

    def reset_add_form(self, color):
        """Clear the add form, keeping the colour just used"""
        for entry in (self.manufacturer_entry, self.model_entry, self.price_entry):
            entry.delete(0, tk.END)
        self._set_add_color(color)
        self.manufacturer_entry.focus()

    def play_cue(self):
        self.master.bell()

    # Messages
    def show_message(self, text):
        self.message_var.set(text)
        self._hide_message_later()

    def _hide_message(self):
        self.message_var.set("")

    # Chart panel
    def render_chart(self):
        self.renderer.render(self.inventory.items)
        self.chart_surface.draw()

    def set_total(self, text):
        self.total_var.set(text)

    def show_notice(self, text):
        self.notice_var.set(text)
        self.notice_label.pack(fill='x', before=self.chart_surface.widget)

    def hide_notice(self):
        self.notice_label.pack_forget()

    def set_legend(self, rows):
        for widget in self.legend_frame.winfo_children():
            widget.destroy()
        for row in rows:
            line = ttk.Frame(self.legend_frame)
            line.pack(fill='x', pady=1)
            tk.Label(line, width=2, bg=row.color, relief=tk.SOLID, borderwidth=1).pack(side='left')
            ttk.Label(line, text=row.text, font=(FONT_FAMILY, 11)).pack(side='left', padx=(8, 0))

    # File menu
    def _export_chart(self):
        """Export the pie chart as an image"""
        filepath = filedialog.asksaveasfilename(
            title="Export Chart",
            defaultextension=".png",
            filetypes=[("PNG images", "*.png"), ("SVG images", "*.svg"), ("All files", "*.*")]
        )

        if filepath:
            try:
                export_chart(self.inventory.items, filepath)
                messagebox.showinfo("Export Complete", f"Chart exported to {filepath}")
            except Exception as e:
                messagebox.showerror("Export Error", f"Failed to export chart: {str(e)}")

    def _report_error(self, exc_type, exc_value, exc_tb):
        messagebox.showerror("Error", f"{exc_type.__name__}: {exc_value}")

    def _on_close(self):
        """Save any pending edit and quit"""
        try:
            self.editor.flush()
        except Exception as e:
            messagebox.showerror("Error", f"Failed to save: {e}")
        self.render_scheduler.cancel()
        self._hide_message_later.cancel()
        self.master.destroy()


# --------------------------------------------------------------------- #
#   Main Application Entry Point
# --------------------------------------------------------------------- #
def main():
    """Main application entry point"""
    try:
        root = tk.Tk()
        app = CarInventoryApp(root)
        root.mainloop()
    except Exception as e:
        print(f"Application error: {e}")
        messagebox.showerror("Application Error", f"Failed to start application: {e}")

if __name__ == "__main__":
    main()
